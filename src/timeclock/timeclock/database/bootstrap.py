from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .connection import DBConfig, DatabaseConnection
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    # schema.sql holds DDL only, no ';' inside literals
    for stmt in _strip_comments(sql).split(";"):
        stmt = stmt.strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    name = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
    logger.info("Schema %s applied to %s", schema_path, conn_factory.config.database)


def list_tables(db_config: dict) -> list[str]:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
