from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .identity import Identity
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: sign users up and in, and turn a profile into an Identity."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> User:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            logger.info("Login failed for unknown email %r", email)
            raise AuthenticationError("Wrong email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            logger.info("Login failed for %s", user.email)
            raise AuthenticationError("Wrong email or password")
        return user

    def register(self, *, name: str, company: str, email: str, password: str) -> User:
        name = require_non_empty(name, "Name")
        company = require_non_empty(company, "Company")
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user_id = self._users.create_user(
            name=name,
            company=company,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role.EMPLOYEE,
        )
        logger.info("Signed up %s (%s)", email, company)
        user = self._users.get_by_id(user_id)
        if user is None:
            raise ValidationError("Sign up failed")
        return user

    def set_role(self, *, email: str, role: Role) -> User:
        user = self._users.get_by_email(require_email(email))
        if not user:
            raise ValidationError("No account with this email")
        self._users.set_role(user.user_id, role)
        logger.info("Role of %s set to %s", user.email, role.value)
        return self._users.get_by_id(user.user_id)

    @staticmethod
    def identity_for(user: User, date: str) -> Identity:
        return Identity(
            person=user.name,
            organization=user.company,
            date=date,
            role=user.role,
            user_id=user.user_id,
        )
