"""
Validators
==========

Field validation for task payloads, list query parameters and sign-up
credentials.

Task field validators raise ``PydanticCustomError`` (a ``ValueError``) so
they can run inside Pydantic models; the message is returned to the
client unchanged. Query and credential validators raise the API's
``ValidationError`` directly.
"""

import re
from datetime import date
from enum import Enum
from typing import Any, Optional, TypeVar

from pydantic_core import PydanticCustomError

from app.core.errors import ErrorLabels, ValidationError
from app.models.task import TaskPriority, TaskStatus
from app.utils.helpers import parse_calendar_date

E = TypeVar("E", bound=Enum)

# Error type used for every task field failure
TASK_FIELD_ERROR = "task_field"

# Sentinel accepted by the list endpoint to mean "no status filter"
STATUS_FILTER_ALL = "ALL"


def _field_error(message: str) -> PydanticCustomError:
    return PydanticCustomError(TASK_FIELD_ERROR, message)


def enum_values(enum_cls: type[Enum]) -> str:
    """Comma separated member values, in declaration order."""
    return ", ".join(member.value for member in enum_cls)


# =============================================================================
# Task fields
# =============================================================================

def validate_title(value: Any, *, required: bool = True) -> str:
    """
    Validate and trim a task title.

    Args:
        value: Raw title from the payload
        required: True on create (missing is an error with the create wording)

    Returns:
        Trimmed title

    Raises:
        PydanticCustomError: If the title is missing, not a string or blank
    """
    if not isinstance(value, str) or not value.strip():
        if required:
            raise _field_error("Title is required and must be a non-empty string")
        raise _field_error("Title must be a non-empty string")
    return value.strip()


def validate_description(value: Any) -> Optional[str]:
    """Trim a description; blank or null becomes None."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise _field_error("Description must be a string")
    return value.strip() or None


def validate_choice(value: Any, enum_cls: type[E], label: str) -> E:
    """
    Validate that ``value`` is one of the members of ``enum_cls``.

    Matching is exact: ``"done"`` is not ``DONE``.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        for member in enum_cls:
            if member.value == value:
                return member
    raise _field_error(f"{label} must be one of: {enum_values(enum_cls)}")


def validate_priority(value: Any) -> TaskPriority:
    return validate_choice(value, TaskPriority, "Priority")


def validate_status(value: Any) -> TaskStatus:
    return validate_choice(value, TaskStatus, "Status")


def validate_due_date(value: Any) -> Optional[date]:
    """
    Validate a due date.

    Accepts ``YYYY-MM-DD`` or a full ISO datetime; only the calendar date
    written in the string is kept. Null or an empty string clears the date.
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return parse_calendar_date(value)
        except ValueError:
            pass
    raise _field_error("Due date must be a valid ISO date string")


# =============================================================================
# List query parameters
# =============================================================================

def parse_status_filter(value: Optional[str]) -> Optional[TaskStatus]:
    """
    Parse the ``status`` query parameter of the list endpoint.

    Args:
        value: Raw query value

    Returns:
        The status to filter on, or None for no status filter
        (absent, empty or ``ALL``)

    Raises:
        ValidationError: If the value is neither ``ALL`` nor a known status
    """
    if value is None or value == "" or value.upper() == STATUS_FILTER_ALL:
        return None

    for member in TaskStatus:
        if member.value == value:
            return member

    raise ValidationError(
        details=f"Status must be one of: {enum_values(TaskStatus)}, or {STATUS_FILTER_ALL}",
        field="status",
        error=ErrorLabels.INVALID_STATUS,
    )


def normalize_search(value: Optional[str]) -> Optional[str]:
    """Trim search text; blank means no search."""
    if value is None:
        return None
    return value.strip() or None


# =============================================================================
# Credentials
# =============================================================================

def validate_email(email: str) -> str:
    """
    Validate email format.

    Args:
        email: Email address to validate

    Returns:
        Validated email (lowercase)

    Raises:
        ValidationError: If email is invalid
    """
    pattern = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'

    if not email or not re.match(pattern, email.strip()):
        raise ValidationError(
            details="Invalid email format",
            field="email",
        )

    return email.strip().lower()


def validate_password(password: str) -> str:
    """
    Validate password strength.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one number

    Args:
        password: Password to validate

    Returns:
        Validated password

    Raises:
        ValidationError: If password is weak
    """
    if not password:
        raise ValidationError(
            details="Password is required",
            field="password",
        )

    if len(password) < 8:
        raise ValidationError(
            details="Password must be at least 8 characters",
            field="password",
        )

    if not (
        any(c.isupper() for c in password)
        and any(c.islower() for c in password)
        and any(c.isdigit() for c in password)
    ):
        raise ValidationError(
            details="Password must contain uppercase, lowercase, and number",
            field="password",
        )

    return password
