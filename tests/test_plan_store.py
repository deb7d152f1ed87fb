"""Tests for src.core.plan_store: candidate slots and confirmed plans."""

import asyncio
import json
from datetime import datetime, timedelta, timezone

import pytest

from src.adapters.memory_storage import InMemoryStorage
from src.core.plan_store import (
    PLANS_KEY,
    PlanStore,
    candidate_slots,
    day_label,
)
from src.core.results import ErrorKind
from src.ports.storage_port import PersistenceError

TZ = "Europe/Copenhagen"
TIMES = ("18:00", "19:00", "20:00")
# Monday 2026-10-19, 14:00 in Copenhagen (CEST, UTC+2)
NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _store(storage, clock=None):
    return PlanStore(
        storage,
        days_ahead=5,
        times_of_day=TIMES,
        tz=TZ,
        clock=clock or (lambda: NOW),
    )


# ---------------------------------------------------------------------------
# candidate_slots
# ---------------------------------------------------------------------------


class TestCandidateSlots:
    def test_count(self):
        assert len(candidate_slots(5, TIMES, now=NOW, tz=TZ)) == 15

    def test_ids_unique_and_ordered(self):
        slots = candidate_slots(5, TIMES, now=NOW, tz=TZ)
        ids = [s.id for s in slots]
        assert len(set(ids)) == 15
        assert ids[:4] == ["0-18:00", "0-19:00", "0-20:00", "1-18:00"]
        assert ids[-1] == "4-20:00"

    def test_strictly_increasing_times(self):
        slots = candidate_slots(5, TIMES, now=NOW, tz=TZ)
        times = [s.time for s in slots]
        assert all(a < b for a, b in zip(times, times[1:]))

    def test_slot_time_is_local_wall_clock(self):
        first = candidate_slots(5, TIMES, now=NOW, tz=TZ)[0]
        assert first.time.hour == 18
        assert first.time.date().isoformat() == "2026-10-19"
        assert first.time.utcoffset() == timedelta(hours=2)

    def test_labels(self):
        labels = {s.id: s.label for s in candidate_slots(5, TIMES, now=NOW, tz=TZ)}
        assert labels["0-18:00"] == "I dag 18:00"
        assert labels["1-19:00"] == "I morgen 19:00"
        assert labels["2-20:00"] == "ons. 21. okt. 20:00"
        assert labels["3-18:00"] == "tors. 22. okt. 18:00"
        assert labels["4-18:00"] == "fre. 23. okt. 18:00"

    def test_custom_times_keep_given_order(self):
        slots = candidate_slots(2, ["20:30", "12:00"], now=NOW, tz=TZ)
        assert [s.id for s in slots] == ["0-20:30", "0-12:00", "1-20:30", "1-12:00"]

    def test_zero_days_is_empty(self):
        assert candidate_slots(0, TIMES, now=NOW, tz=TZ) == []

    def test_naive_now_treated_as_local(self):
        slots = candidate_slots(1, ["18:00"], now=datetime(2026, 10, 19, 23, 30), tz=TZ)
        assert slots[0].time.date().isoformat() == "2026-10-19"

    def test_today_follows_timezone(self):
        # 23:30 UTC is already the next day in Copenhagen
        late = datetime(2026, 10, 19, 23, 30, tzinfo=timezone.utc)
        slots = candidate_slots(1, ["18:00"], now=late, tz=TZ)
        assert slots[0].time.date().isoformat() == "2026-10-20"

    def test_crosses_month_boundary(self):
        end_of_month = datetime(2026, 10, 30, 10, 0, tzinfo=timezone.utc)
        labels = [s.label for s in candidate_slots(3, ["18:00"], now=end_of_month, tz=TZ)]
        assert labels[2] == "søn. 1. nov. 18:00"

    def test_malformed_time_raises(self):
        with pytest.raises(ValueError):
            candidate_slots(1, ["6pm"], now=NOW, tz=TZ)

    def test_pure(self):
        a = candidate_slots(5, TIMES, now=NOW, tz=TZ)
        b = candidate_slots(5, TIMES, now=NOW, tz=TZ)
        assert a == b

    def test_defaults_from_settings(self):
        slots = candidate_slots(now=NOW)
        assert len(slots) == 15


class TestDayLabel:
    def test_today_and_tomorrow(self):
        day = NOW.date()
        assert day_label(day, 0) == "I dag"
        assert day_label(day, 1) == "I morgen"

    def test_may_has_no_abbreviation_dot(self):
        day = datetime(2026, 5, 6).date()
        assert day_label(day, 3) == "ons. 6. maj"


# ---------------------------------------------------------------------------
# PlanStore
# ---------------------------------------------------------------------------


class TestPlanStoreSlots:
    def test_slots_generated_on_init(self, memory_storage):
        store = _store(memory_storage)
        assert len(store.slots) == 15
        assert store.find_slot("0-18:00").label == "I dag 18:00"

    def test_find_unknown(self, memory_storage):
        assert _store(memory_storage).find_slot("unknown-id") is None
        assert _store(memory_storage).find_slot(None) is None

    def test_refresh_follows_clock(self, memory_storage):
        moments = iter([NOW, NOW + timedelta(days=1)])
        store = _store(memory_storage, clock=lambda: next(moments))
        store.refresh_slots()
        assert store.slots[0].time.date().isoformat() == "2026-10-20"

    def test_settings_defaults(self, memory_storage):
        store = PlanStore(memory_storage, clock=lambda: NOW)
        assert len(store.slots) == 15


class TestConfirm:
    @pytest.mark.asyncio
    async def test_confirm_appends_plan(self, memory_storage):
        store = _store(memory_storage)
        result = await store.confirm("Kaffe", "0-18:00")

        assert result.ok
        plan = result.value
        slot = store.find_slot("0-18:00")
        assert plan.activity == "Kaffe"
        assert plan.label == slot.label == "I dag 18:00"
        assert plan.time == slot.time
        assert plan.created_at == NOW
        assert await store.load() == [plan]

    @pytest.mark.asyncio
    async def test_persisted_json_keys(self, memory_storage):
        await _store(memory_storage).confirm("Middag", "1-19:00")
        data = json.loads(await memory_storage.get_item(PLANS_KEY))
        assert data[0]["activity"] == "Middag"
        assert data[0]["label"] == "I morgen 19:00"
        assert "createdAt" in data[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("activity,slot_id", [
        (None, "0-18:00"),
        ("", "0-18:00"),
        ("Kaffe", None),
        ("Kaffe", ""),
        ("Kaffe", "unknown-id"),
        ("Kaffe", "5-18:00"),
    ])
    async def test_missing_selection(self, memory_storage, activity, slot_id):
        result = await _store(memory_storage).confirm(activity, slot_id)
        assert result.ok is False
        assert result.error_kind is ErrorKind.MISSING_SELECTION
        assert await memory_storage.get_item(PLANS_KEY) is None

    @pytest.mark.asyncio
    async def test_appends_in_order(self, memory_storage, clock):
        store = _store(memory_storage, clock=clock)
        await store.confirm("Kaffe", "0-18:00")
        await store.confirm("Gåtur", "2-19:00")
        plans = await store.load()
        assert [p.activity for p in plans] == ["Kaffe", "Gåtur"]
        assert plans[0].id != plans[1].id

    @pytest.mark.asyncio
    async def test_roundtrip_sqlite(self, sqlite_storage):
        result = await _store(sqlite_storage).confirm("Brætspil", "3-20:00")
        reloaded = await _store(sqlite_storage).load()
        assert reloaded == [result.value]

    @pytest.mark.asyncio
    async def test_appends_after_malformed(self):
        storage = InMemoryStorage({PLANS_KEY: "{broken"})
        store = _store(storage)
        await store.confirm("Kaffe", "0-18:00")
        assert len(await store.load()) == 1

    @pytest.mark.asyncio
    async def test_write_failure_surfaced(self, write_failing_storage):
        result = await _store(write_failing_storage).confirm("Kaffe", "0-18:00")
        assert result.ok is False
        assert isinstance(result.error, PersistenceError)

    @pytest.mark.asyncio
    async def test_read_failure_keeps_existing_plans(self, flaky_storage, clock):
        store = _store(flaky_storage, clock=clock)
        for slot_id in ("0-18:00", "0-19:00", "0-20:00"):
            await store.confirm("Kaffe", slot_id)
        before = flaky_storage.items[PLANS_KEY]

        flaky_storage.fail_next_reads = 1
        result = await store.confirm("Middag", "1-19:00")

        assert result.ok is False
        assert isinstance(result.error, PersistenceError)
        assert flaky_storage.items[PLANS_KEY] == before
        assert len(await store.load()) == 3

    @pytest.mark.asyncio
    async def test_confirm_after_read_recovers(self, flaky_storage, clock):
        store = _store(flaky_storage, clock=clock)
        await store.confirm("Kaffe", "0-18:00")
        flaky_storage.fail_next_reads = 1
        await store.confirm("Middag", "1-19:00")

        await store.confirm("Gåtur", "2-20:00")

        assert [p.activity for p in await store.load()] == ["Kaffe", "Gåtur"]

    @pytest.mark.asyncio
    async def test_concurrent_confirms_all_persisted(self, memory_storage, clock):
        store = _store(memory_storage, clock=clock)
        await asyncio.gather(
            store.confirm("Kaffe", "0-18:00"),
            store.confirm("Middag", "1-19:00"),
            store.confirm("Gåtur", "2-20:00"),
        )
        assert len(await store.load()) == 3


class TestLoad:
    @pytest.mark.asyncio
    async def test_empty(self, memory_storage):
        assert await _store(memory_storage).load() == []

    @pytest.mark.asyncio
    async def test_read_failure_is_empty(self, failing_storage):
        assert await _store(failing_storage).load() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["{broken", "{}", '[{"activity": "Kaffe"}]'])
    async def test_malformed_reads_as_empty(self, raw):
        storage = InMemoryStorage({PLANS_KEY: raw})
        assert await _store(storage).load() == []


class TestPlanStoreArguments:
    def test_explicit_zero_days_not_replaced_by_settings(self, memory_storage):
        store = PlanStore(memory_storage, days_ahead=0, clock=lambda: NOW)
        assert store.slots == []

    def test_explicit_empty_times_not_replaced_by_settings(self, memory_storage):
        store = PlanStore(memory_storage, times_of_day=(), clock=lambda: NOW)
        assert store.slots == []

    def test_omitted_arguments_use_settings(self, memory_storage):
        store = PlanStore(memory_storage, days_ahead=2, clock=lambda: NOW)
        assert [s.id for s in store.slots][:3] == ["0-18:00", "0-19:00", "0-20:00"]
        assert len(store.slots) == 6
