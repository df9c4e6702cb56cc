"""Shared validation utilities"""

import re
from typing import Optional

# local@domain.tld, case-insensitive
EMAIL_PATTERN = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)


def is_blank(value) -> bool:
    """True for None, empty strings and whitespace-only strings"""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def blank_to_none(value):
    """Map empty form inputs to None so they are stored as NULL"""
    if isinstance(value, str) and not value.strip():
        return None
    return value
