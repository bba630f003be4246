"""
Shared utilities for the Agenda API.

Input validators used by every endpoint.
"""

from .validators import (
    validate_date_string,
    validate_time_string,
    validate_docname,
)

__all__ = [
    "validate_date_string",
    "validate_time_string",
    "validate_docname",
]
