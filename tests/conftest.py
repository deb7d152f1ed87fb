"""Shared test fixtures and configuration.

Sets up environment variables before any src imports, and provides
storage fixtures: in-memory, SQLite on a temp file, and one that fails.
"""

import os

# Patch env vars BEFORE any src imports
os.environ.setdefault("STORAGE_PROVIDER", "memory")
os.environ.setdefault("TIMEZONE", "Europe/Copenhagen")
os.environ.setdefault("PLAN_DAYS_AHEAD", "5")
os.environ.setdefault("PLAN_TIMES_OF_DAY", "18:00,19:00,20:00")

from datetime import datetime, timedelta, timezone

import pytest

from src.ports.storage_port import PersistenceError

# 2026-10-19 12:00 UTC is a Monday, 14:00 in Copenhagen
FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


class FailingStorage:
    """Storage whose selected operations raise PersistenceError."""

    def __init__(self, fail_reads=True, fail_writes=True, initial=None):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.items = dict(initial or {})
        self.fail_next_reads = 0

    async def get_item(self, key):
        if self.fail_next_reads:
            self.fail_next_reads -= 1
            raise PersistenceError(f"read of {key} failed")
        if self.fail_reads:
            raise PersistenceError(f"read of {key} failed")
        return self.items.get(key)

    async def set_item(self, key, value):
        if self.fail_writes:
            raise PersistenceError(f"write of {key} failed")
        self.items[key] = value

    async def remove_item(self, key):
        if self.fail_writes:
            raise PersistenceError(f"remove of {key} failed")
        self.items.pop(key, None)


class TickingClock:
    """Clock that advances one second per call, so time ids never collide."""

    def __init__(self, start=FIXED_NOW):
        self.current = start

    def __call__(self):
        now = self.current
        self.current = now + timedelta(seconds=1)
        return now


@pytest.fixture
def memory_storage():
    """Return an empty InMemoryStorage."""
    from src.adapters.memory_storage import InMemoryStorage
    return InMemoryStorage()


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_friend_finder.db")


@pytest.fixture
def sqlite_storage(tmp_db_path):
    """Return a SQLiteStorage instance backed by a temp file."""
    from src.adapters.sqlite_storage import SQLiteStorage
    return SQLiteStorage(db_path=tmp_db_path)


@pytest.fixture
def failing_storage():
    """Return a storage where every read and write fails."""
    return FailingStorage()


@pytest.fixture
def write_failing_storage():
    """Return a storage that reads fine but rejects writes."""
    return FailingStorage(fail_reads=False, fail_writes=True)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Return a clock starting at FIXED_NOW that ticks one second per call."""
    return TickingClock()


@pytest.fixture
def flaky_storage():
    """Return a working storage; set fail_next_reads to break upcoming reads."""
    return FailingStorage(fail_reads=False, fail_writes=False)
