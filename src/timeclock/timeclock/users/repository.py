from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        company: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> str:
        raise NotImplementedError

    def set_role(self, user_id: str, role: Role) -> bool:
        raise NotImplementedError
