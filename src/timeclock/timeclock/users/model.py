from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a signed-up user profile.

    Note: Plain data object (no DB access code).
    """

    user_id: str
    name: str
    company: str
    email: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    created_at: Optional[str] = None
