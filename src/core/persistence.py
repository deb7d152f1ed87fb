"""Key-scoped JSON read/write shared by the stores.

Reads never fail the caller: a missing key, an unreadable medium, and
malformed content all come back as None. Each case is logged under its
own name so a corrupt record is visible in the logs.

Read-modify-write paths fetch the raw text themselves and only use
decode_record, so an unreadable medium stops the write instead of
replacing the stored list.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, TypeVar

import pydantic
from pydantic import TypeAdapter

from src.ports.storage_port import PersistenceError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def time_id(moment: datetime) -> str:
    """Millisecond Unix timestamp id. Two ids made in the same millisecond collide."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return str((moment - _EPOCH) // timedelta(milliseconds=1))


def decode_record(key: str, raw: str | None, adapter: TypeAdapter[T]) -> T | None:
    """Validate raw stored text; malformed content counts as missing."""
    if raw is None:
        logger.debug("No data stored under '%s'", key)
        return None

    try:
        return adapter.validate_json(raw)
    except pydantic.ValidationError as exc:
        logger.warning(
            "Malformed data under '%s' treated as missing (%d errors)",
            key, exc.error_count(),
        )
        return None


async def read_record(
    storage: KeyValueStorage, key: str, adapter: TypeAdapter[T],
) -> T | None:
    """Load and validate the record under key, or None."""
    try:
        raw = await storage.get_item(key)
    except PersistenceError as exc:
        logger.warning("Could not read '%s', using default: %s", key, exc)
        return None
    return decode_record(key, raw, adapter)


async def write_record(
    storage: KeyValueStorage, key: str, adapter: TypeAdapter[T], value: T,
) -> None:
    """Serialize value and store it under key.

    Raises:
        PersistenceError: The storage medium rejected the write.
    """
    raw = adapter.dump_json(value, by_alias=True).decode("utf-8")
    await storage.set_item(key, raw)
