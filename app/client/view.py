"""
Task View Pipeline
==================

Derives the list the task screen renders from the raw task list plus the
current filter, search text and sort key:

    filter (status) -> search (title / description) -> sort

Pure and synchronous. The input list is never mutated; callers keep the
raw list as their single source of truth and re-derive on every change.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

FILTER_ALL = "ALL"

# (value, label) pairs in menu order
STATUS_FILTERS: list[tuple[str, str]] = [
    (FILTER_ALL, "All Tasks"),
    ("TODO", "To Do"),
    ("IN_PROGRESS", "In Progress"),
    ("DONE", "Done"),
]

SORT_DATE_DESC = "date-desc"
SORT_DATE_ASC = "date-asc"
SORT_PRIORITY_DESC = "priority-desc"
SORT_PRIORITY_ASC = "priority-asc"

SORT_OPTIONS: list[tuple[str, str]] = [
    (SORT_DATE_DESC, "Newest First"),
    (SORT_DATE_ASC, "Oldest First"),
    (SORT_PRIORITY_DESC, "High Priority First"),
    (SORT_PRIORITY_ASC, "Low Priority First"),
]

DEFAULT_SORT = SORT_DATE_DESC

PRIORITY_ORDER = {"HIGH": 3, "MEDIUM": 2, "LOW": 1}


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class TaskItem:
    """A task as the client holds it."""

    id: str
    title: str
    status: str
    priority: str
    created_at: datetime
    description: Optional[str] = None
    due_date: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "TaskItem":
        """Build from the API's camelCase task JSON."""
        updated = data.get("updatedAt")
        return cls(
            id=str(data["id"]),
            title=data["title"],
            status=data["status"],
            priority=data["priority"],
            created_at=_parse_timestamp(data["createdAt"]),
            description=data.get("description"),
            due_date=data.get("dueDate"),
            updated_at=_parse_timestamp(updated) if updated else None,
        )

    def to_payload(self) -> dict[str, Any]:
        """Editable fields, in the shape the create/update endpoints accept."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "dueDate": self.due_date,
        }


def matches_status(task: TaskItem, filter_status: str) -> bool:
    return filter_status == FILTER_ALL or task.status == filter_status


def matches_search(task: TaskItem, search: Optional[str]) -> bool:
    """Case-insensitive substring match on title or description."""
    if not search:
        return True
    query = search.lower()
    if query in task.title.lower():
        return True
    return task.description is not None and query in task.description.lower()


def sort_tasks(tasks: Iterable[TaskItem], sort_by: str) -> list[TaskItem]:
    """
    Order tasks by ``sort_by``.

    Sorting is stable, so ties keep their input order. An unrecognised key
    returns the tasks in input order.
    """
    items = list(tasks)
    if sort_by == SORT_DATE_DESC:
        return sorted(items, key=lambda t: t.created_at, reverse=True)
    if sort_by == SORT_DATE_ASC:
        return sorted(items, key=lambda t: t.created_at)
    if sort_by == SORT_PRIORITY_DESC:
        return sorted(items, key=lambda t: PRIORITY_ORDER.get(t.priority, 0), reverse=True)
    if sort_by == SORT_PRIORITY_ASC:
        return sorted(items, key=lambda t: PRIORITY_ORDER.get(t.priority, 0))
    return items


def derive_view(
    tasks: Iterable[TaskItem],
    filter_status: str = FILTER_ALL,
    search: Optional[str] = None,
    sort_by: str = DEFAULT_SORT,
) -> list[TaskItem]:
    """Filter, search and sort ``tasks`` into a new list."""
    visible = [
        task
        for task in tasks
        if matches_status(task, filter_status) and matches_search(task, search)
    ]
    return sort_tasks(visible, sort_by)
