from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import DayRecord, RecordKey, check_mergeable
from .repository import DayRecordRepository

logger = logging.getLogger(__name__)

# DayRecord attribute -> day_records column.
COLUMNS = {
    "day": "day_name",
    "clock_in": "clock_in",
    "lunch_out": "lunch_out",
    "end_lunch": "end_lunch",
    "clock_out": "clock_out",
    "notes": "notes",
    "user_id": "user_id",
}

_SELECT = """
    SELECT work_date, day_name, person, organization, user_id,
           clock_in, lunch_out, end_lunch, clock_out, notes
    FROM day_records
"""


def _to_record(r: dict) -> DayRecord:
    return DayRecord.from_document(
        {
            "date": normalize_mysql_date(r["work_date"]),
            "day": r.get("day_name"),
            "name": r["person"],
            "company": r["organization"],
            "uid": None if r.get("user_id") is None else str(r["user_id"]),
            "clockIn": r.get("clock_in"),
            "lunchOut": r.get("lunch_out"),
            "endLunch": r.get("end_lunch"),
            "clockOut": r.get("clock_out"),
            "notes": r.get("notes"),
        }
    )


class MySQLDayRecordRepository(DayRecordRepository):
    """Shared store; safe for several devices writing the same record."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find(self, key: RecordKey) -> Optional[DayRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE work_date=%s AND person=%s AND organization=%s",
                (key.date, key.person, key.organization),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def upsert_merge(self, key: RecordKey, fields: Mapping[str, Any]) -> DayRecord:
        check_mergeable(fields)
        blank = DayRecord.empty(key)
        values = blank.merged(fields)

        insert_cols = ["work_date", "person", "organization", "day_name"]
        params: list[object] = [key.date, key.person, key.organization, values.day]
        updates = []
        for attr in sorted(fields):
            col = COLUMNS[attr]
            if col != "day_name":
                insert_cols.append(col)
                params.append(getattr(values, attr))
            updates.append(f"{col}=VALUES({col})")
        updates.append("updated_at=CURRENT_TIMESTAMP")

        placeholders = ", ".join(["%s"] * len(insert_cols))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO day_records ({", ".join(insert_cols)})
                VALUES ({placeholders})
                ON DUPLICATE KEY UPDATE {", ".join(updates)}
                """,
                tuple(params),
            )
            cur.execute(
                _SELECT + " WHERE work_date=%s AND person=%s AND organization=%s",
                (key.date, key.person, key.organization),
            )
            return _to_record(fetchone(cur))

    def query_range(
        self,
        *,
        start: str,
        end: str,
        person: Optional[str] = None,
        organization: Optional[str] = None,
    ) -> Sequence[DayRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start, end]

        if person and person.strip():
            clauses.append("LOCATE(%s, LOWER(person)) > 0")
            params.append(person.strip().lower())
        if organization and organization.strip():
            clauses.append("LOCATE(%s, LOWER(organization)) > 0")
            params.append(organization.strip().lower())

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {where} ORDER BY work_date DESC, updated_at DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[DayRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY created_at DESC, record_id DESC")
            return [_to_record(r) for r in fetchall(cur)]

    def wipe_all(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM day_records")
            logger.warning("Wiped %d day records from the shared store", cur.rowcount)
