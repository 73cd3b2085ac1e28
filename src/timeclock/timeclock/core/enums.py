from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class StampField(str, Enum):
    """The four shift events, valued by their wire names."""

    CLOCK_IN = "clockIn"
    LUNCH_OUT = "lunchOut"
    END_LUNCH = "endLunch"
    CLOCK_OUT = "clockOut"

    @property
    def attribute(self) -> str:
        """Matching DayRecord attribute name."""
        return {
            StampField.CLOCK_IN: "clock_in",
            StampField.LUNCH_OUT: "lunch_out",
            StampField.END_LUNCH: "end_lunch",
            StampField.CLOCK_OUT: "clock_out",
        }[self]


class ShiftStatus(str, Enum):
    """Read-only projection of a day record's progress."""

    NOT_STARTED = "Not started"
    CLOCKED_IN = "Clocked In"
    AT_LUNCH = "At Lunch"
    WORKING = "Working"
    CLOCKED_OUT = "Clocked Out"


class StorageBackend(str, Enum):
    LOCAL = "local"
    MYSQL = "mysql"
