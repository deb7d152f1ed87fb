"""Storage adapter factory: creates the right adapter based on config."""

from __future__ import annotations

from src.config import settings
from src.ports.storage_port import KeyValueStorage


def create_storage(db_path: str | None = None) -> KeyValueStorage:
    """Return the storage adapter matching STORAGE_PROVIDER setting.

    Args:
        db_path: Overrides DATABASE_PATH for the SQLite adapter.
    """
    provider = settings.STORAGE_PROVIDER.lower()

    if provider == "sqlite":
        from src.adapters.sqlite_storage import SQLiteStorage

        return SQLiteStorage(db_path=db_path)

    if provider == "memory":
        from src.adapters.memory_storage import InMemoryStorage

        return InMemoryStorage()

    raise ValueError(f"Unknown STORAGE_PROVIDER: {provider!r}")
