from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import IdentityRequiredError
from ..timesheets.model import RecordKey


@dataclass(frozen=True)
class Identity:
    """Who is acting, for which organization and on which date."""

    person: str
    organization: str
    date: str
    role: Role = Role.EMPLOYEE
    user_id: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.person and self.person.strip()
                    and self.organization and self.organization.strip()
                    and self.date)

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def record_key(self) -> RecordKey:
        return RecordKey(self.date, self.person, self.organization)

    def owns(self, key: RecordKey) -> bool:
        return key.person == self.person and key.organization == self.organization


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None or not identity.is_complete:
        raise IdentityRequiredError()
    return identity
