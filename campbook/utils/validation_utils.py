"""
campbook/utils/validation_utils.py

Purpose: Input validation

- E.164 phone number check
- Document id check
- Input sanitization
"""

import re
from typing import Optional

from bson import ObjectId

E164_PATTERN = re.compile(r"\+[1-9]\d{1,14}")


def validate_phone_number(phone: Optional[str]) -> bool:
    """
    Validates a phone number in E.164 format.

    Format: '+' followed by 2-15 digits, the first one nonzero.
    Example: +14155550123

    Args:
        phone: Phone number string

    Returns:
        True if valid, False otherwise
    """
    if not phone:
        return False

    return bool(E164_PATTERN.fullmatch(phone))


def is_valid_object_id(value: Optional[str]) -> bool:
    """
    Checks whether a string can be used as a MongoDB document id.
    """
    if not value or not isinstance(value, str):
        return False
    return ObjectId.is_valid(value)


def normalize_email(email: Optional[str]) -> Optional[str]:
    """
    Trims and lowercases an email address.
    """
    if email is None:
        return None
    return email.strip().lower()
