from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..common.datetime_utils import day_name_from_iso, parse_iso_date
from ..core.enums import ShiftStatus
from ..core.exceptions import ValidationError
from . import arithmetic

# DayRecord attribute -> stored document field.
DOCUMENT_FIELDS = {
    "date": "date",
    "day": "day",
    "person": "name",
    "organization": "company",
    "clock_in": "clockIn",
    "lunch_out": "lunchOut",
    "end_lunch": "endLunch",
    "clock_out": "clockOut",
    "notes": "notes",
    "user_id": "uid",
}

STAMP_ATTRIBUTES = ("clock_in", "lunch_out", "end_lunch", "clock_out")

# Attributes upsert_merge may write; the key attributes are fixed per record.
MERGEABLE_FIELDS = frozenset({"day", "notes", "user_id", *STAMP_ATTRIBUTES})


@dataclass(frozen=True)
class RecordKey:
    """Identity of a day record: one record per (date, person, organization)."""

    date: str
    person: str
    organization: str

    def __str__(self) -> str:
        return f"{self.date}__{self.person}__{self.organization}"


@dataclass(frozen=True)
class DayRecord:
    """One shift for one person on one calendar date."""

    date: str
    person: str
    organization: str
    day: str = ""
    clock_in: Optional[str] = None
    lunch_out: Optional[str] = None
    end_lunch: Optional[str] = None
    clock_out: Optional[str] = None
    notes: str = ""
    user_id: Optional[str] = None

    @classmethod
    def empty(cls, key: RecordKey, *, user_id: Optional[str] = None) -> "DayRecord":
        return cls(
            date=key.date,
            person=key.person,
            organization=key.organization,
            day=day_name_from_iso(key.date),
            user_id=user_id,
        )

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.date, self.person, self.organization)

    @property
    def lunch_minutes(self) -> Optional[int]:
        return arithmetic.lunch_minutes(self)

    @property
    def total_hours(self) -> Optional[float]:
        return arithmetic.total_hours(self)

    @property
    def status(self) -> ShiftStatus:
        from .state import status_for

        return status_for(self)

    def merged(self, fields: Mapping[str, Any]) -> "DayRecord":
        """Copy with the given attributes replaced, leaving siblings intact."""
        check_mergeable(fields)
        return replace(self, **_normalize_fields(fields))

    def to_document(self) -> dict:
        doc = {DOCUMENT_FIELDS[attr]: getattr(self, attr) for attr in DOCUMENT_FIELDS}
        for attr in STAMP_ATTRIBUTES:
            doc[DOCUMENT_FIELDS[attr]] = doc[DOCUMENT_FIELDS[attr]] or ""
        return doc

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "DayRecord":
        """Validate a stored document into a fixed-shape record.

        Empty stamp strings become absent and a missing weekday label is
        recomputed from the date.
        """
        if not isinstance(doc, Mapping):
            raise ValidationError("Stored day record is not an object")

        date = _required_text(doc, "date")
        parse_iso_date(date)
        values: dict[str, Any] = {
            "date": date,
            "person": _required_text(doc, "name"),
            "organization": _required_text(doc, "company"),
        }
        for attr in STAMP_ATTRIBUTES:
            values[attr] = _optional_text(doc, DOCUMENT_FIELDS[attr])
        values["notes"] = _optional_text(doc, "notes") or ""
        values["day"] = _optional_text(doc, "day") or day_name_from_iso(date)
        values["user_id"] = _optional_text(doc, "uid")
        return cls(**values)


def check_mergeable(fields: Mapping[str, Any]) -> None:
    unknown = set(fields) - MERGEABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be merged into a day record: {sorted(unknown)}")


def _normalize_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(fields)
    for attr in STAMP_ATTRIBUTES:
        if attr in out:
            out[attr] = out[attr] or None
    if "notes" in out:
        out["notes"] = out["notes"] or ""
    return out


def _required_text(doc: Mapping[str, Any], name: str) -> str:
    value = doc.get(name)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Stored day record is missing {name!r}")
    return value


def _optional_text(doc: Mapping[str, Any], name: str) -> Optional[str]:
    value = doc.get(name)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError(f"Stored day record field {name!r} must be text")
    return value
