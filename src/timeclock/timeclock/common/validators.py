from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    local, _, domain = email.partition("@")
    if not local or "." not in domain:
        raise ValidationError("Email is not valid")
    return email
