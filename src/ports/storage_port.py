"""Storage port: abstract key-value interface for persisted app state.

Stores depend on this protocol, never on a specific medium.
"""

from __future__ import annotations

from typing import Protocol


class PersistenceError(Exception):
    """Raised when any storage read, write, or delete fails."""


class KeyValueStorage(Protocol):
    """Abstract key-value interface used by the stores.

    Values are serialized text; a missing key reads as None.
    """

    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...
