from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import add_days_iso, parse_iso_date, start_of_week_iso
from ..core.exceptions import ValidationError
from ..timesheets.arithmetic import round_half_up
from ..timesheets.model import DayRecord
from ..timesheets.repository import DayRecordRepository


@dataclass
class PersonTotal:
    person: str
    organization: str
    hours: float = 0.0
    day_count: int = 0


@dataclass(frozen=True)
class RangeReport:
    start: str
    end: str
    records: list[DayRecord]
    summary: list[PersonTotal]
    grand_total: float

    @property
    def table(self) -> list[list]:
        return to_table(self.records)


def aggregate_by_person(records: Iterable[DayRecord]) -> dict[tuple[str, str], PersonTotal]:
    """Hours and day count per (person, organization).

    Records without a complete clock-in/out pair add nothing.
    """
    buckets: dict[tuple[str, str], PersonTotal] = {}
    for r in records:
        hours = r.total_hours
        if hours is None:
            continue
        key = (r.person, r.organization)
        entry = buckets.get(key)
        if entry is None:
            entry = buckets[key] = PersonTotal(person=r.person, organization=r.organization)
        entry.hours += hours
        entry.day_count += 1

    for entry in buckets.values():
        entry.hours = round_half_up(entry.hours)
    return buckets


def grand_total(records: Iterable[DayRecord]) -> float:
    return round_half_up(sum(h for h in (r.total_hours for r in records) if h is not None))


def _blank(value):
    return "" if value is None else value


def to_table(records: Iterable[DayRecord]) -> list[list]:
    """Detail rows in REPORT_HEADERS order; absent values render as ''."""
    return [
        [
            r.date,
            r.day,
            r.person,
            r.organization,
            r.clock_in or "",
            r.lunch_out or "",
            r.end_lunch or "",
            r.clock_out or "",
            _blank(r.lunch_minutes),
            _blank(r.total_hours),
            r.notes or "",
        ]
        for r in records
    ]


def summary_table(summary: Iterable[PersonTotal]) -> list[list]:
    return [[s.person, s.organization, s.hours, s.day_count] for s in summary]


def sort_for_detail(records: Iterable[DayRecord]) -> list[DayRecord]:
    # ISO dates are fixed-width, so string order is date order
    return sorted(records, key=lambda r: r.date, reverse=True)


def week_range(which: str, today: str) -> tuple[str, str]:
    """Monday..Sunday of this week, or of last week."""
    monday = start_of_week_iso(today)
    if which == "this":
        return monday, add_days_iso(monday, 6)
    if which == "last":
        return add_days_iso(monday, -7), add_days_iso(monday, -1)
    raise ValidationError(f"Unknown range preset: {which!r}")


class ReportService:
    """Use case: summarize day records over a date range."""

    def __init__(self, records: DayRecordRepository):
        self._records = records

    def build_report(
        self,
        *,
        start: str,
        end: str,
        person: Optional[str] = None,
        organization: Optional[str] = None,
    ) -> RangeReport:
        if parse_iso_date(start) > parse_iso_date(end):
            raise ValidationError("Start date must not be after end date")

        rows = self._records.query_range(start=start, end=end, person=person, organization=organization)
        return summarize(rows, start=start, end=end)


def summarize(records: Sequence[DayRecord], *, start: str, end: str) -> RangeReport:
    return RangeReport(
        start=start,
        end=end,
        records=sort_for_detail(records),
        summary=list(aggregate_by_person(records).values()),
        grand_total=grand_total(records),
    )
