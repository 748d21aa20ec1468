"""
Validation utilities for request input.

Validators append field-level messages to an error list instead of failing on the
first problem, so a response can report every bad field at once.
"""
import re
from typing import Any

from .error_handlers import ValidationError, get_error_message

EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def _error(param: str, msg: str) -> dict:
    return {"param": param, "msg": msg}


def check_required(errors: list[dict], value: Any, param: str, msg: str) -> None:
    """Value must be present and, for strings, not blank."""
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(_error(param, msg))


def check_email(errors: list[dict], email: str | None, param: str = "email",
                msg: str = "Please include a valid email") -> str | None:
    """Validate email format and return it normalized (trimmed, lower-cased)."""
    if not email or not isinstance(email, str):
        errors.append(_error(param, msg))
        return None

    email = email.strip().lower()
    if len(email) > 255 or not re.match(EMAIL_PATTERN, email):
        errors.append(_error(param, msg))
        return None

    return email


# bcrypt only hashes the first 72 bytes and refuses anything longer.
MAX_PASSWORD_BYTES = 72


def check_password(errors: list[dict], password: str | None, param: str = "password",
                   msg: str | None = None) -> None:
    """Validate password strength."""
    if not password or not isinstance(password, str) or len(password) < 6:
        errors.append(_error(param, msg or get_error_message("weak_password")))
        return

    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(_error(param, get_error_message("password_too_long")))


def raise_if_errors(errors: list[dict]) -> None:
    if errors:
        raise ValidationError(errors)


def parse_int_id(value: str) -> int | None:
    """Path ids arrive as strings on some routes; anything non-numeric is simply unknown."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None
