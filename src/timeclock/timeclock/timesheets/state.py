from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import ShiftStatus, StampField
from .model import DayRecord


@dataclass(frozen=True)
class ActionAvailability:
    """Which stamping actions the presentation layer should offer."""

    clock_in: bool = False
    lunch_out: bool = False
    end_lunch: bool = False
    clock_out: bool = False

    def permits(self, field: StampField) -> bool:
        return bool(getattr(self, field.attribute))

    def as_dict(self) -> dict[str, bool]:
        return {f.value: self.permits(f) for f in StampField}


def status_for(record: DayRecord) -> ShiftStatus:
    if record.clock_out:
        return ShiftStatus.CLOCKED_OUT
    if record.end_lunch:
        return ShiftStatus.WORKING
    if record.lunch_out:
        return ShiftStatus.AT_LUNCH
    if record.clock_in:
        return ShiftStatus.CLOCKED_IN
    return ShiftStatus.NOT_STARTED


def available_actions(record: Optional[DayRecord]) -> ActionAvailability:
    """Enforce the stamping order; lunch steps may be skipped."""
    if record is None:
        return ActionAvailability()

    has_in = bool(record.clock_in)
    has_out = bool(record.clock_out)
    return ActionAvailability(
        clock_in=not has_in,
        lunch_out=has_in and not record.lunch_out and not has_out,
        end_lunch=bool(record.lunch_out) and not record.end_lunch and not has_out,
        clock_out=has_in and not has_out,
    )


def breakdown(record: DayRecord) -> str:
    pieces = []
    if record.clock_in and record.clock_out:
        pieces.append(f"Shift: {record.clock_in} → {record.clock_out}")
    lunch = record.lunch_minutes
    if lunch is not None:
        pieces.append(f"Lunch: {lunch} mins")
    return " • ".join(pieces)


def today_view(record: DayRecord) -> dict:
    """Everything the today panel shows for one record."""
    return {
        "record": record.to_document(),
        "status": status_for(record).value,
        "actions": available_actions(record).as_dict(),
        "lunch_minutes": record.lunch_minutes,
        "total_hours": record.total_hours,
        "breakdown": breakdown(record),
    }
