"""
Helper Functions
================

Common utility functions used across the application.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional


def generate_uuid() -> uuid.UUID:
    """Generate a new UUID v4."""
    return uuid.uuid4()


def utc_now() -> datetime:
    """Get current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


def format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime to ISO 8601 string."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        # SQLite hands back naive values; they were written as UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


def parse_uuid(value: str) -> Optional[uuid.UUID]:
    """Parse a UUID string, returning None when it is malformed."""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def parse_calendar_date(value: str) -> date:
    """
    Parse an ISO 8601 date or datetime string into a calendar date.

    The date written in the string is kept as-is: ``2025-12-31T23:30:00-05:00``
    yields 2025-12-31, no conversion to UTC or to the server's zone.

    Raises:
        ValueError: If the string is not a valid ISO date or datetime
    """
    text = value.strip()
    if not text:
        raise ValueError("empty date string")
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
