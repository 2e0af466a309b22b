"""
Display helpers for tasks and users.
"""

from datetime import date, datetime
from typing import Optional, Union

STATUS_LABELS = {
    "TODO": "To Do",
    "IN_PROGRESS": "In Progress",
    "DONE": "Done",
}

PRIORITY_LABELS = {
    "LOW": "Low",
    "MEDIUM": "Medium",
    "HIGH": "High",
}

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def priority_label(priority: str) -> str:
    return PRIORITY_LABELS.get(priority, priority)


def format_date(value: Optional[Union[date, datetime, str]]) -> Optional[str]:
    """
    Short US date, e.g. ``Dec 6, 2025``.

    Strings are read as ISO dates; for a datetime string only the date
    part written in it is used. Returns None for a missing value.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        day = date.fromisoformat(value[:10])
    return f"{MONTH_ABBREVIATIONS[day.month - 1]} {day.day}, {day.year}"


def get_initials(name: Optional[str]) -> str:
    """Up to two upper-case initials from a display name; ``U`` when unknown."""
    if not name or not name.strip():
        return "U"
    return "".join(part[0] for part in name.split()).upper()[:2]
