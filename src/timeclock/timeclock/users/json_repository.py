from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from ..core.constants import USERS_COLLECTION
from ..core.enums import Role
from ..database.json_store import JsonDocumentStore
from .model import User
from .repository import UserRepository


def _to_user(doc: dict) -> User:
    return User(
        user_id=str(doc["uid"]),
        name=doc["name"],
        company=doc["company"],
        email=doc["email"],
        password_hash=doc["passwordHash"],
        role=Role(doc.get("role") or Role.EMPLOYEE.value),
        created_at=doc.get("createdAt"),
    )


class JsonUserRepository(UserRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[User]:
        for doc in self._store.read(USERS_COLLECTION):
            if str(doc.get("uid")) == str(user_id):
                return _to_user(doc)
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        needle = (email or "").strip().lower()
        for doc in self._store.read(USERS_COLLECTION):
            if str(doc.get("email", "")).lower() == needle:
                return _to_user(doc)
        return None

    def create_user(self, *, name: str, company: str, email: str, password_hash: str, role: Role) -> str:
        uid = uuid.uuid4().hex
        with self._store.write(USERS_COLLECTION) as docs:
            docs.append(
                {
                    "uid": uid,
                    "name": name,
                    "company": company,
                    "email": email,
                    "passwordHash": password_hash,
                    "role": role.value,
                    "createdAt": datetime.now(timezone.utc).isoformat(),
                }
            )
        return uid

    def set_role(self, user_id: str, role: Role) -> bool:
        with self._store.write(USERS_COLLECTION) as docs:
            for doc in docs:
                if str(doc.get("uid")) == str(user_id):
                    doc["role"] = role.value
                    return True
        return False
