from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import DayRecord, RecordKey


class DayRecordRepository(Protocol):
    """Record store interface (DIP): device-local or shared implementations."""

    def find(self, key: RecordKey) -> Optional[DayRecord]:
        raise NotImplementedError

    def upsert_merge(self, key: RecordKey, fields: Mapping[str, Any]) -> DayRecord:
        """Create or update the record, writing only the provided fields.

        Repeating a call with the same data leaves the store unchanged.
        """

        raise NotImplementedError

    def query_range(
        self,
        *,
        start: str,
        end: str,
        person: Optional[str] = None,
        organization: Optional[str] = None,
    ) -> Sequence[DayRecord]:
        """Records with start <= date <= end, newest first.

        ``person``/``organization`` are case-insensitive substring filters.
        """

        raise NotImplementedError

    def list_all(self) -> Sequence[DayRecord]:
        """Every record, most recently created first."""
        raise NotImplementedError

    def wipe_all(self) -> None:
        raise NotImplementedError
