"""Flask session as the identity gate for controllers."""
from __future__ import annotations

import logging
from functools import wraps
from typing import Optional

from flask import jsonify, session

from ..common.datetime_utils import today_iso
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    ExportUnavailableError,
    IdentityRequiredError,
    PersistenceError,
    ValidationError,
)
from .identity import Identity

logger = logging.getLogger(__name__)

_IDENTITY_KEYS = ("user_id", "name", "company", "role", "date")

_STATUS_CODES = (
    (ValidationError, 400),
    (IdentityRequiredError, 401),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (PersistenceError, 503),
    (ExportUnavailableError, 503),
)


def current_identity(timezone: str) -> Optional[Identity]:
    """Identity from the session; the date defaults to today in the fixed zone."""
    name = session.get("name")
    company = session.get("company")
    if not name or not company:
        return None
    try:
        role = Role(session.get("role") or Role.EMPLOYEE.value)
    except ValueError:
        role = Role.EMPLOYEE
    return Identity(
        person=name,
        organization=company,
        date=session.get("date") or today_iso(timezone),
        role=role,
        user_id=session.get("user_id"),
    )


def sign_in(identity: Identity) -> None:
    """Store a signed-in identity; the date is left to default to today."""
    clear_identity()
    session["user_id"] = identity.user_id
    session["name"] = identity.person
    session["company"] = identity.organization
    session["role"] = identity.role.value


def set_device_identity(*, name: str, company: str, date: Optional[str]) -> None:
    """Identity typed into the device form; always an employee."""
    clear_identity()
    session["name"] = name
    session["company"] = company
    session["role"] = Role.EMPLOYEE.value
    if date:
        session["date"] = date


def clear_identity() -> None:
    for key in _IDENTITY_KEYS:
        session.pop(key, None)


def json_error(exc: Exception):
    for exc_type, status in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return jsonify({"success": False, "message": str(exc)}), status
    if isinstance(exc, DomainError):
        return jsonify({"success": False, "message": str(exc)}), 400
    logger.exception("Unexpected error")
    return jsonify({"success": False, "message": "System error, please try again"}), 500


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "name" not in session or "company" not in session:
            return json_error(IdentityRequiredError())
        return view(*args, **kwargs)

    return wrapper


def manager_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return json_error(AuthenticationError("Please sign in to continue"))
        if session.get("role") != Role.MANAGER.value:
            return json_error(AuthorizationError("Managers only"))
        return view(*args, **kwargs)

    return wrapper
