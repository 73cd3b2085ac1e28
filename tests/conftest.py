from __future__ import annotations

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import pytest

from src.timeclock.timeclock.core.enums import Role
from src.timeclock.timeclock.timesheets.model import DayRecord, RecordKey, check_mergeable
from src.timeclock.timeclock.timesheets.service import TimesheetService
from src.timeclock.timeclock.users.identity import Identity

NY = ZoneInfo("America/New_York")


class FakeClock:
    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def at(self, hhmmss: str) -> "FakeClock":
        h, m, s = (int(p) for p in hhmmss.split(":"))
        self.moment = self.moment.replace(hour=h, minute=m, second=s)
        return self


class InMemoryDayRecords:
    def __init__(self, records: Optional[list[DayRecord]] = None):
        self._by_key: dict[RecordKey, DayRecord] = {r.key: r for r in (records or [])}
        self.find_calls = 0
        self.merges: list[tuple[RecordKey, dict]] = []

    def find(self, key: RecordKey) -> Optional[DayRecord]:
        self.find_calls += 1
        return self._by_key.get(key)

    def upsert_merge(self, key: RecordKey, fields) -> DayRecord:
        check_mergeable(fields)
        self.merges.append((key, dict(fields)))
        current = self._by_key.get(key) or DayRecord.empty(key)
        merged = current.merged(fields)
        self._by_key[key] = merged
        return merged

    def query_range(self, *, start, end, person=None, organization=None):
        def contains(value, needle):
            return not needle or needle.lower() in value.lower()

        rows = [
            r
            for r in self._by_key.values()
            if start <= r.date <= end and contains(r.person, person) and contains(r.organization, organization)
        ]
        return sorted(rows, key=lambda r: r.date, reverse=True)

    def list_all(self):
        return list(reversed(list(self._by_key.values())))

    def wipe_all(self) -> None:
        self._by_key.clear()

    def __len__(self) -> int:
        return len(self._by_key)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 3, 4, 9, 0, 0, tzinfo=NY)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    return FakeClock(fixed_now)


@pytest.fixture
def records() -> InMemoryDayRecords:
    return InMemoryDayRecords()


@pytest.fixture
def service(records, clock) -> TimesheetService:
    return TimesheetService(records, clock=clock)


@pytest.fixture
def ana() -> Identity:
    return Identity(person="Ana", organization="Acme", date="2024-03-04", role=Role.EMPLOYEE, user_id="u1")


@pytest.fixture
def manager() -> Identity:
    return Identity(person="Mia", organization="Acme", date="2024-03-04", role=Role.MANAGER, user_id="m1")
