from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..core.constants import DAY_RECORDS_COLLECTION
from ..database.json_store import JsonDocumentStore
from .model import DayRecord, RecordKey, check_mergeable
from .repository import DayRecordRepository

logger = logging.getLogger(__name__)


def _contains(haystack: str, needle: Optional[str]) -> bool:
    if not needle or not needle.strip():
        return True
    return needle.strip().lower() in (haystack or "").lower()


class JsonDayRecordRepository(DayRecordRepository):
    """Per-device store; new records are kept at the front of the collection."""

    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def _all(self) -> list[DayRecord]:
        return [DayRecord.from_document(doc) for doc in self._store.read(DAY_RECORDS_COLLECTION)]

    def find(self, key: RecordKey) -> Optional[DayRecord]:
        for record in self._all():
            if record.key == key:
                return record
        return None

    def upsert_merge(self, key: RecordKey, fields: Mapping[str, Any]) -> DayRecord:
        check_mergeable(fields)
        with self._store.write(DAY_RECORDS_COLLECTION) as docs:
            for i, doc in enumerate(docs):
                current = DayRecord.from_document(doc)
                if current.key == key:
                    merged = current.merged(fields)
                    docs[i] = merged.to_document()
                    return merged

            created = DayRecord.empty(key).merged(fields)
            docs.insert(0, created.to_document())
            logger.debug("Created day record %s", key)
            return created

    def query_range(
        self,
        *,
        start: str,
        end: str,
        person: Optional[str] = None,
        organization: Optional[str] = None,
    ) -> Sequence[DayRecord]:
        rows = [
            r
            for r in self._all()
            if start <= r.date <= end and _contains(r.person, person) and _contains(r.organization, organization)
        ]
        rows.sort(key=lambda r: r.date, reverse=True)
        return rows

    def list_all(self) -> Sequence[DayRecord]:
        """Every record in store order (most recently created first)."""
        return self._all()

    def wipe_all(self) -> None:
        with self._store.write(DAY_RECORDS_COLLECTION) as docs:
            count = len(docs)
            docs.clear()
        logger.warning("Wiped %d day records from %s", count, self._store.path)
