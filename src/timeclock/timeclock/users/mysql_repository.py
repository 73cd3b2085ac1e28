from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT user_id, name, company, email, password_hash, role, created_at
    FROM users
"""


def _to_user(row: dict) -> User:
    created = row.get("created_at")
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        company=row["company"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row.get("role") or Role.EMPLOYEE.value),
        created_at=created.isoformat() if hasattr(created, "isoformat") else created,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        if not str(user_id).isdigit():
            return None
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE email=%s", ((email or "").strip().lower(),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, name: str, company: str, email: str, password_hash: str, role: Role) -> str:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, company, email, password_hash, role)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, company, email, password_hash, role.value),
            )
            return str(cur.lastrowid)

    def set_role(self, user_id: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET role=%s WHERE user_id=%s", (role.value, int(user_id)))
            return cur.rowcount > 0
