from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_in_zone, parse_iso_date, time_hhmmss
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import StampField
from ..core.exceptions import AuthorizationError, ValidationError
from ..users.identity import Identity, require_identity
from .model import DayRecord, RecordKey
from .repository import DayRecordRepository
from .state import today_view

logger = logging.getLogger(__name__)


def parse_stamp_field(value: StampField | str) -> StampField:
    if isinstance(value, StampField):
        return value
    try:
        return StampField(value)
    except ValueError:
        raise ValidationError(f"Unknown stamp: {value!r}")


class TimesheetService:
    """Use case: keep one day record per (date, person, organization) and stamp it."""

    def __init__(
        self,
        records: DayRecordRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Optional[Callable[[], datetime]] = None,
        device_local: bool = False,
    ):
        self._records = records
        self._timezone = timezone
        self._clock = clock or (lambda: now_in_zone(timezone))
        self._device_local = bool(device_local)

    def get_or_create(self, identity: Optional[Identity]) -> DayRecord:
        identity = require_identity(identity)
        key = identity.record_key
        record = self._records.find(key)
        if record is not None:
            return record

        fields = {"user_id": identity.user_id} if identity.user_id else {}
        return self._records.upsert_merge(key, fields)

    def stamp(self, identity: Optional[Identity], field: StampField | str) -> DayRecord:
        """Set one stamp to the current time unless it is already set.

        The record is re-read right before the check so a stale copy on
        another device can never overwrite an existing stamp.
        """
        field = parse_stamp_field(field)
        record = self.get_or_create(identity)
        if getattr(record, field.attribute):
            logger.info("%s already stamped for %s, ignoring", field.value, record.key)
            return record

        value = time_hhmmss(self._clock())
        updated = self._records.upsert_merge(record.key, {field.attribute: value})
        logger.info("Stamped %s=%s for %s", field.value, value, record.key)
        return updated

    def today(self, identity: Optional[Identity]) -> dict:
        return today_view(self.get_or_create(identity))

    def update_notes(self, key: RecordKey, notes: str, *, identity: Optional[Identity]) -> DayRecord:
        identity = require_identity(identity)
        if not identity.is_manager and not identity.owns(key):
            raise AuthorizationError("You can only edit your own notes")

        if self._records.find(key) is None:
            raise ValidationError("No day record for this date")
        return self._records.upsert_merge(key, {"notes": (notes or "").strip()})

    def history(self, identity: Optional[Identity], *, start: str, end: str) -> Sequence[DayRecord]:
        """The acting person's own records in [start, end], newest first."""
        identity = require_identity(identity)
        if parse_iso_date(start) > parse_iso_date(end):
            raise ValidationError("Start date must not be after end date")

        rows = self._records.query_range(
            start=start, end=end, person=identity.person, organization=identity.organization
        )
        return [r for r in rows if identity.owns(r.key)]

    def _require_whole_store_access(self, identity: Optional[Identity], action: str) -> None:
        # a device-local store belongs to whoever uses the device
        if self._device_local:
            return
        identity = require_identity(identity)
        if not identity.is_manager:
            raise AuthorizationError(f"Only managers can {action} the shared log")

    def device_log(self, identity: Optional[Identity]) -> Sequence[DayRecord]:
        """Every saved record, across people and dates, most recently created first."""
        self._require_whole_store_access(identity, "list")
        return self._records.list_all()

    def wipe_all(self, identity: Optional[Identity]) -> None:
        """Erase every record in the store."""
        self._require_whole_store_access(identity, "erase")
        self._records.wipe_all()
        logger.warning("All day records erased by %s", identity.person if identity else "device user")
