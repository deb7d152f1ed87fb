"""
Friend Finder: Profile Store.

Owns the single user profile under `user_profile`. Every save validates
the draft, recomputes age from the birthdate, and overwrites the whole
record; delete removes the key so the profile reads as absent afterwards.
"""

from __future__ import annotations

import asyncio
import logging
import math
import re
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from src.core.persistence import read_record, write_record
from src.core.results import ErrorKind, Result
from src.data.models import Profile, ProfileDraft
from src.ports.storage_port import PersistenceError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

PROFILE_KEY = "user_profile"

MIN_AGE = 0
MAX_AGE = 120

_BIRTHDATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_SECONDS_PER_YEAR = 365.25 * 24 * 60 * 60

_PROFILE_ADAPTER = TypeAdapter(Profile)


def compute_age(birthdate: str, now: datetime | None = None) -> int | None:
    """Return whole years since a YYYY-MM-DD birthdate, or None.

    Years are counted as 365.25 days, so the result can be off by one
    right around a birthday. A future date gives a negative age.
    """
    if not isinstance(birthdate, str):
        return None
    match = _BIRTHDATE_RE.fullmatch(birthdate)
    if match is None:
        return None
    try:
        born = datetime(*(int(part) for part in match.groups()))
    except ValueError:
        return None

    if now is None:
        now = datetime.now()
    elapsed = (now.replace(tzinfo=None) - born).total_seconds()
    return math.floor(elapsed / _SECONDS_PER_YEAR)


def toggle_interest(interests: list[str], interest: str) -> list[str]:
    """Deselect interest if selected, otherwise append it."""
    if interest in interests:
        return [i for i in interests if i != interest]
    return [*interests, interest]


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ProfileStore:
    """Load, validate-and-save, and delete the user profile."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._lock = asyncio.Lock()

    async def load(self) -> Profile | None:
        return await read_record(self._storage, PROFILE_KEY, _PROFILE_ADAPTER)

    async def validate_and_save(
        self, draft: ProfileDraft, now: datetime | None = None,
    ) -> Result[Profile]:
        """Validate the draft and persist the normalized profile.

        Returns a failure Result for EMPTY_NAME, INVALID_BIRTHDATE, or a
        PersistenceError when the write did not go through.
        """
        name = (draft.name or "").strip()
        if not name:
            return Result.invalid(ErrorKind.EMPTY_NAME)

        birthdate = _blank_to_none(draft.birthdate)
        age = None
        if birthdate is not None:
            age = compute_age(birthdate, now=now)
            if age is None or not MIN_AGE <= age <= MAX_AGE:
                logger.info("Rejected birthdate %r (age %s)", birthdate, age)
                return Result.invalid(ErrorKind.INVALID_BIRTHDATE)

        profile = Profile(
            name=name,
            birthdate=birthdate,
            age=age,
            gender=_blank_to_none(draft.gender),
            interests=list(dict.fromkeys(draft.interests)),
            image_uri=_blank_to_none(draft.image_uri),
        )

        async with self._lock:
            try:
                await write_record(self._storage, PROFILE_KEY, _PROFILE_ADAPTER, profile)
            except PersistenceError as exc:
                logger.error("Failed to save profile: %s", exc)
                return Result.failure(exc)

        logger.info(
            "Profile saved: '%s' (age %s, %d interests)",
            profile.name, profile.age, len(profile.interests),
        )
        return Result.success(profile)

    async def remove(self) -> None:
        """Delete the stored profile. Deleting an absent profile is a no-op."""
        async with self._lock:
            try:
                await self._storage.remove_item(PROFILE_KEY)
            except PersistenceError as exc:
                logger.error("Failed to delete profile: %s", exc)
                return
        logger.info("Profile deleted")
