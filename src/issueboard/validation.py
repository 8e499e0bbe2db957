"""Shared validation functions for all entry points.

Pure functions with no MCP, FastAPI or Click dependencies.
"""

from __future__ import annotations

import unicodedata
from typing import Any

from issueboard.core import VALID_PRIORITIES, VALID_STATUSES, IssueFormData

_MAX_PRINCIPAL_LENGTH = 254
_MAX_TITLE_LENGTH = 200


def sanitize_principal(value: Any, name: str = "creator") -> tuple[str, str | None]:
    """Validate and clean a principal identifier (user id or email).

    Returns (cleaned, None) on success or ("", error_message) on failure.
    Strips whitespace, then checks: non-empty, max length, no control/format chars.
    """
    if not isinstance(value, str):
        return ("", f"{name} must be a string")
    # Check for control/format chars before stripping: reject "\nbad" rather
    # than silently absorbing the newline via strip().
    for ch in value:
        cat = unicodedata.category(ch)
        if cat.startswith("C"):  # Cc (control) and Cf (format)
            return ("", f"{name} must not contain control characters (found U+{ord(ch):04X})")
    cleaned = value.strip()
    if not cleaned:
        return ("", f"{name} must not be empty")
    if len(cleaned) > _MAX_PRINCIPAL_LENGTH:
        return ("", f"{name} must be at most {_MAX_PRINCIPAL_LENGTH} characters")
    return (cleaned, None)


def validate_title(value: Any) -> str:
    if not isinstance(value, str):
        msg = "Title must be a string"
        raise TypeError(msg)
    if not value.strip():
        msg = "Title cannot be empty"
        raise ValueError(msg)
    if len(value) > _MAX_TITLE_LENGTH:
        msg = f"Title must be at most {_MAX_TITLE_LENGTH} characters"
        raise ValueError(msg)
    return value


def validate_status(value: Any) -> str:
    if value not in VALID_STATUSES:
        msg = f"Invalid status '{value}'. Valid statuses: {', '.join(VALID_STATUSES)}"
        raise ValueError(msg)
    return str(value)


def validate_priority(value: Any) -> str:
    if value not in VALID_PRIORITIES:
        msg = f"Invalid priority '{value}'. Valid priorities: {', '.join(VALID_PRIORITIES)}"
        raise ValueError(msg)
    return str(value)


def validate_text(value: Any, name: str) -> str:
    if not isinstance(value, str):
        msg = f"{name} must be a string"
        raise TypeError(msg)
    return value


def validate_form(form: IssueFormData) -> None:
    """Raise ``ValueError``/``TypeError`` if *form* cannot be persisted as-is."""
    validate_title(form.title)
    validate_text(form.description, "description")
    validate_priority(form.priority)
    validate_status(form.status)
    validate_text(form.assigned_to, "assigned_to")
