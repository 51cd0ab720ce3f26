# advisor_booking/core/validators.py
"""
Input validation shared by the HTTP layer and the services.

Everything here runs before a transaction is opened; failures raise
``ValidationException`` (InvalidInput).
"""

from typing import Any, Optional, Type, TypeVar
from enum import Enum

from email_validator import EmailNotValidError, validate_email

from .constants import MAX_CLIENT_NAME_LENGTH, MAX_EMAIL_LENGTH, MIN_CLIENT_NAME_LENGTH
from .exceptions import ValidationException

E = TypeVar("E", bound=Enum)


def require_positive_id(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationException(
            f"{field} must be a positive integer", details={"field": field, "value": value}
        )
    return value


def normalize_client_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not MIN_CLIENT_NAME_LENGTH <= len(cleaned) <= MAX_CLIENT_NAME_LENGTH:
        raise ValidationException(
            f"client_name must be between {MIN_CLIENT_NAME_LENGTH} and "
            f"{MAX_CLIENT_NAME_LENGTH} characters",
            details={"field": "client_name"},
        )
    return cleaned


def normalize_email(email: Optional[str], field: str = "client_email") -> str:
    """Trim, lower-case and check ``email`` against the standard address grammar."""
    cleaned = (email or "").strip().lower()
    if not cleaned or len(cleaned) > MAX_EMAIL_LENGTH:
        raise ValidationException("Invalid email address", details={"field": field})
    try:
        validate_email(cleaned, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationException(
            "Invalid email address", details={"field": field, "reason": str(exc)}
        ) from exc
    return cleaned


def parse_enum(enum_cls: Type[E], value: Any, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = [member.value for member in enum_cls]
        raise ValidationException(
            f"{field} must be one of: {', '.join(allowed)}",
            details={"field": field, "value": value, "allowed": allowed},
        ) from exc
