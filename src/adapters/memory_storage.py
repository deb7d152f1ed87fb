"""In-memory key-value storage adapter.

Nothing survives the process. Used for tests and throwaway sessions
(STORAGE_PROVIDER=memory).
"""

from __future__ import annotations


class InMemoryStorage:
    """Dict-backed storage implementing KeyValueStorage."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        """Return a copy of everything currently stored."""
        return dict(self._items)
