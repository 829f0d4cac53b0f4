"""Field rules shared by the request schemas and the booking service.

Each helper returns the normalized value or raises ``ValueError``, which
pydantic turns into a 422 and the services turn into ``ValidationFailed``.
"""
import re
from typing import Optional

CONTACT_PATTERN = re.compile(r"^\+?[\d\s()-]{7,}$")
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 8


def validate_name(value: Optional[str], min_length: int = NAME_MIN_LENGTH) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError("Name is required")
    if not min_length <= len(normalized) <= NAME_MAX_LENGTH:
        raise ValueError(f"Name must be {min_length}-{NAME_MAX_LENGTH} characters")
    return normalized


def validate_contact(value: Optional[str]) -> str:
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError("Contact is required")
    if not CONTACT_PATTERN.match(normalized):
        raise ValueError("Invalid phone number format")
    return normalized


def validate_password_strength(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if not re.search(r"[a-z]", value):
        raise ValueError("Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Password must contain an uppercase letter")
    if not re.search(r"\d", value):
        raise ValueError("Password must contain a number")
    return value
