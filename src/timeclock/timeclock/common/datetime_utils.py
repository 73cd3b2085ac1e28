from __future__ import annotations

from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.constants import DATE_FORMAT, DEFAULT_TIMEZONE, TIME_FORMAT
from ..core.exceptions import ValidationError


def zone(name: str = DEFAULT_TIMEZONE) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(f"Unknown time zone: {name!r}")


def now_in_zone(name: str = DEFAULT_TIMEZONE) -> datetime:
    """Current wall-clock time in the fixed zone.

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(zone(name))


def today_iso(name: str = DEFAULT_TIMEZONE) -> str:
    return now_in_zone(name).strftime(DATE_FORMAT)


def time_hhmmss(moment: datetime) -> str:
    return moment.strftime(TIME_FORMAT)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), DATE_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def day_name_from_iso(value: str) -> str:
    """Short weekday label ("Mon") of a calendar date.

    A calendar date has one weekday in every zone, so no conversion is needed.
    """
    return parse_iso_date(value).strftime("%a")


def start_of_week_iso(value: str) -> str:
    """Monday of the week containing the date."""
    d = parse_iso_date(value)
    return (d - timedelta(days=d.weekday())).strftime(DATE_FORMAT)


def add_days_iso(value: str, days: int) -> str:
    return (parse_iso_date(value) + timedelta(days=int(days))).strftime(DATE_FORMAT)
