"""
Friend Finder: Activity Plan Store.

Generates the candidate slots the planner offers (a few evenings over the
next days) and appends confirmed plans to `activity_plans`. A plan's time
is always one of the generated slots, never freehand.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import TYPE_CHECKING, Callable, Sequence
from zoneinfo import ZoneInfo

from pydantic import TypeAdapter

from src.core.persistence import decode_record, read_record, time_id, write_record
from src.core.results import ErrorKind, Result
from src.data.models import ActivityPlan, Slot
from src.ports.storage_port import PersistenceError

if TYPE_CHECKING:
    from src.ports.storage_port import KeyValueStorage

logger = logging.getLogger(__name__)

PLANS_KEY = "activity_plans"

DEFAULT_DAYS_AHEAD = 5
DEFAULT_TIMES_OF_DAY: tuple[str, ...] = ("18:00", "19:00", "20:00")

_PLANS_ADAPTER = TypeAdapter(list[ActivityPlan])

# da-DK short names, as the app has always displayed them
_WEEKDAYS = ("man.", "tirs.", "ons.", "tors.", "fre.", "lør.", "søn.")
_MONTHS = (
    "jan.", "feb.", "mar.", "apr.", "maj", "jun.",
    "jul.", "aug.", "sep.", "okt.", "nov.", "dec.",
)


def day_label(day: date, offset: int) -> str:
    """Return 'I dag', 'I morgen', or a short date like 'ons. 21. okt.'."""
    if offset == 0:
        return "I dag"
    if offset == 1:
        return "I morgen"
    return f"{_WEEKDAYS[day.weekday()]} {day.day}. {_MONTHS[day.month - 1]}"


def _parse_time_of_day(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def candidate_slots(
    days_ahead: int = DEFAULT_DAYS_AHEAD,
    times_of_day: Sequence[str] = DEFAULT_TIMES_OF_DAY,
    now: datetime | None = None,
    tz: str | None = None,
) -> list[Slot]:
    """Build one slot per (day offset, time of day), day-major.

    Args:
        days_ahead: Number of days starting today.
        times_of_day: "HH:MM" strings; order is kept within each day.
        now: Reference moment (defaults to the current time in tz).
        tz: IANA zone for slot times (defaults to settings.TIMEZONE).

    Raises:
        ValueError: A time of day is not "HH:MM".
    """
    if tz is None:
        from src.config import settings
        tz = settings.TIMEZONE
    zone = ZoneInfo(tz)

    if now is None:
        now = datetime.now(zone)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=zone)
    else:
        now = now.astimezone(zone)

    parsed = [(label, _parse_time_of_day(label)) for label in times_of_day]
    today = now.date()

    slots: list[Slot] = []
    for offset in range(days_ahead):
        day = today + timedelta(days=offset)
        prefix = day_label(day, offset)
        for hm, tod in parsed:
            slots.append(Slot(
                id=f"{offset}-{hm}",
                time=datetime.combine(day, tod, tzinfo=zone),
                label=f"{prefix} {hm}",
            ))
    return slots


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanStore:
    """Candidate slots plus the persisted list of confirmed plans."""

    def __init__(
        self,
        storage: KeyValueStorage,
        days_ahead: int | None = None,
        times_of_day: Sequence[str] | None = None,
        tz: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if days_ahead is None or times_of_day is None or tz is None:
            from src.config import settings
            if days_ahead is None:
                days_ahead = settings.PLAN_DAYS_AHEAD
            if times_of_day is None:
                times_of_day = settings.PLAN_TIMES_OF_DAY
            if tz is None:
                tz = settings.TIMEZONE

        self._storage = storage
        self._days_ahead = days_ahead
        self._times_of_day = tuple(times_of_day)
        self._tz = tz
        self._clock = clock
        self._lock = asyncio.Lock()
        self._slots: list[Slot] = []
        self.refresh_slots()

    @property
    def slots(self) -> list[Slot]:
        """The candidates a plan can currently be confirmed for."""
        return list(self._slots)

    def refresh_slots(self) -> list[Slot]:
        """Regenerate candidates from the current clock (e.g. after midnight)."""
        self._slots = candidate_slots(
            self._days_ahead, self._times_of_day, now=self._clock(), tz=self._tz,
        )
        return self.slots

    def find_slot(self, slot_id: str | None) -> Slot | None:
        for slot in self._slots:
            if slot.id == slot_id:
                return slot
        return None

    async def load(self) -> list[ActivityPlan]:
        return await read_record(self._storage, PLANS_KEY, _PLANS_ADAPTER) or []

    async def confirm(
        self, activity: str | None, slot_id: str | None,
    ) -> Result[ActivityPlan]:
        """Append a plan for activity at the candidate slot_id.

        Returns MISSING_SELECTION when either is missing or slot_id is not
        a current candidate, or a PersistenceError when the stored list
        could not be read or written. Nothing is written after a failed read.
        """
        slot = self.find_slot(slot_id)
        if not activity or slot is None:
            return Result.invalid(ErrorKind.MISSING_SELECTION)

        created_at = self._clock()
        plan = ActivityPlan(
            id=time_id(created_at),
            activity=activity,
            time=slot.time,
            label=slot.label,
            created_at=created_at,
        )

        async with self._lock:
            try:
                raw = await self._storage.get_item(PLANS_KEY)
            except PersistenceError as exc:
                logger.error("Could not read plans before saving '%s': %s", activity, exc)
                return Result.failure(exc)
            plans = decode_record(PLANS_KEY, raw, _PLANS_ADAPTER) or []
            try:
                await write_record(
                    self._storage, PLANS_KEY, _PLANS_ADAPTER, [*plans, plan],
                )
            except PersistenceError as exc:
                logger.error("Failed saving plan '%s' at %s: %s", activity, slot.label, exc)
                return Result.failure(exc)

        logger.info("Plan confirmed: '%s' at %s", plan.activity, plan.label)
        return Result.success(plan)
