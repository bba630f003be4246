"""
Agenda Input Validators

Validation utilities for values coming from the UI before they
reach the booking engine.
"""

import re

from agenda_empresarial.agenda_empresarial.exceptions import DataIntegrityError, InvalidTimeFormat, ValidationError
from agenda_empresarial.agenda_empresarial.scheduling.timeutils import parse_time
from agenda_empresarial.agenda_empresarial.utils.dates import getdate


def validate_date_string(date_str: str, field_name: str = "date") -> str:
    """
    Validate date string format (YYYY-MM-DD).

    Args:
        date_str: Date string to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated date string

    Raises:
        ValidationError: If date format is invalid
    """
    if not date_str:
        raise ValidationError(f"{field_name} is required")

    date_str = str(date_str).strip()

    # Basic format check
    if not re.match(r"^\d{4}-\d{2}-\d{2}$", date_str):
        raise ValidationError(f"Invalid {field_name} format. Use YYYY-MM-DD")

    # Shape is fine, the calendar date must also exist (no 2025-02-30)
    try:
        getdate(date_str)
    except DataIntegrityError:
        raise ValidationError(f"Invalid {field_name}: {date_str} is not a calendar date")

    return date_str


def validate_time_string(time_str: str, field_name: str = "time") -> str:
    """
    Validate wall-clock time format (HH:mm).

    Args:
        time_str: Time string to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated time string

    Raises:
        ValidationError: If time format is invalid
    """
    if not time_str:
        raise ValidationError(f"{field_name} is required")

    time_str = str(time_str).strip()

    # Basic format check
    if not re.match(r"^\d{1,2}:\d{2}$", time_str):
        raise ValidationError(f"Invalid {field_name} format. Use HH:mm")

    # Hours 0-23, minutes 0-59
    try:
        parse_time(time_str)
    except InvalidTimeFormat:
        raise ValidationError(f"Invalid {field_name}: {time_str} is out of range")

    return time_str


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a record id.

    Ensures the id is not too long and doesn't contain script/HTML patterns.

    Args:
        name: Record id to validate
        field_name: Name of field for error messages

    Returns:
        str: Validated id

    Raises:
        ValidationError: If id is invalid
    """
    if not name:
        raise ValidationError(f"{field_name} is required")

    name = str(name).strip()

    # Length check
    if len(name) > 140:
        raise ValidationError(f"{field_name} is too long")

    # Block markup that would end up rendered in the UI
    dangerous_patterns = [
        r"<script",
        r"javascript:",
        r"onclick",
        r"onerror",
    ]

    name_lower = name.lower()
    for pattern in dangerous_patterns:
        if re.search(pattern, name_lower, re.IGNORECASE):
            raise ValidationError(f"Invalid {field_name}")

    return name
