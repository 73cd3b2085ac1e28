"""Worked-time arithmetic over the four stamps of a day record.

All functions are pure and fail softly: a stamp that cannot be parsed is
treated as absent, and a derived value that cannot be computed is ``None``.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Protocol


class Stamped(Protocol):
    clock_in: Optional[str]
    lunch_out: Optional[str]
    end_lunch: Optional[str]
    clock_out: Optional[str]


def round_half_up(value: float, places: int = 2) -> float:
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def parse_time_of_day(value: Optional[str]) -> Optional[int]:
    """Seconds since midnight of an ``HH:MM:SS`` string.

    Out-of-range components ("25:70:00") are accepted as-is.
    """
    if not value:
        return None
    parts = str(value).split(":")
    if len(parts) < 3:
        return None
    try:
        hours, minutes, seconds = (int(p.strip()) for p in parts[:3])
    except ValueError:
        return None
    return hours * 3600 + minutes * 60 + seconds


def lunch_seconds(record: Stamped) -> Optional[int]:
    start = parse_time_of_day(record.lunch_out)
    end = parse_time_of_day(record.end_lunch)
    if start is None or end is None:
        return None
    return max(0, end - start)


def lunch_minutes(record: Stamped) -> Optional[int]:
    seconds = lunch_seconds(record)
    if seconds is None:
        return None
    return int(round_half_up(seconds / 60, 0))


def total_hours(record: Stamped) -> Optional[float]:
    """Hours between clock-in and clock-out minus lunch, 2 decimals.

    Lunch is always subtracted when both lunch stamps parse, and every
    intermediate result is clamped at zero.
    """
    start = parse_time_of_day(record.clock_in)
    end = parse_time_of_day(record.clock_out)
    if start is None or end is None:
        return None
    worked = max(0, end - start)
    worked = max(0, worked - (lunch_seconds(record) or 0))
    return round_half_up(worked / 3600)
