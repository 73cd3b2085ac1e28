from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import PersistenceError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Connection + cursor for one unit of work; driver errors become PersistenceError."""
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.error("Database unavailable: %s", e)
        raise PersistenceError("Database is unavailable") from e
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.error("Database operation failed: %s", e)
        raise PersistenceError("Database operation failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def normalize_mysql_date(value: Any) -> str:
    """DATE columns come back as datetime.date (or str with some connectors)."""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
