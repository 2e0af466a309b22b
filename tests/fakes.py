# tests/fakes.py

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from app.client.api import ApiError
from app.client.view import TaskItem
from app.services.auth_service import Session, extract_session_token


def make_session(user_id: uuid.UUID, email: str, name: Optional[str] = None) -> Session:
    return Session(
        user_id=user_id,
        email=email,
        name=name,
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        token_id=uuid.uuid4().hex,
    )


class FakeSessionResolver:
    """Resolves fixed tokens to fixed sessions; anything else is signed out."""

    def __init__(self, sessions: Mapping[str, Session]):
        self.sessions = dict(sessions)
        self.calls = 0

    async def get_session(self, headers, cookies) -> Optional[Session]:
        self.calls += 1
        token = extract_session_token(headers, cookies)
        if token is None:
            return None
        return self.sessions.get(token)


class FailingSessionResolver:
    async def get_session(self, headers, cookies) -> Optional[Session]:
        raise RuntimeError("auth provider unreachable")


class FakeRedis:
    """The two Redis commands the cache manager uses, backed by a dict."""

    def __init__(self) -> None:
        self.values: dict[str, Any] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key: str, ttl: int, value: Any) -> bool:
        self.values[key] = value
        self.ttls[key] = ttl
        return True

    async def exists(self, key: str) -> int:
        return 1 if key in self.values else 0


def make_task_item(
    title: str,
    *,
    status: str = "TODO",
    priority: str = "LOW",
    description: Optional[str] = None,
    minutes_ago: int = 0,
    task_id: Optional[str] = None,
) -> TaskItem:
    created = datetime(2025, 12, 1, 12, 0, tzinfo=timezone.utc) - timedelta(minutes=minutes_ago)
    return TaskItem(
        id=task_id or str(uuid.uuid4()),
        title=title,
        status=status,
        priority=priority,
        created_at=created,
        description=description,
    )


class FakeTaskApi:
    """
    In-memory stand-in for TaskApiClient used by controller tests.

    Set ``fail_with`` to make the next calls raise that exception.
    """

    def __init__(self, tasks: Optional[list[TaskItem]] = None, user: Optional[dict] = None):
        self.tasks = list(tasks or [])
        self.user = user
        self.fail_with: Optional[Exception] = None
        self.calls: list[tuple[str, Any]] = []

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    async def get_session(self) -> Optional[dict]:
        self.calls.append(("get_session", None))
        if self.user is None:
            return None
        return {"user": self.user, "expiresAt": "2030-01-01T00:00:00+00:00"}

    async def sign_out(self) -> None:
        self.calls.append(("sign_out", None))
        self._maybe_fail()
        self.user = None

    async def list_tasks(self, status=None, search=None) -> list[TaskItem]:
        self.calls.append(("list_tasks", None))
        self._maybe_fail()
        return list(self.tasks)

    async def create_task(self, payload: dict) -> TaskItem:
        self.calls.append(("create_task", payload))
        self._maybe_fail()
        item = make_task_item(
            payload["title"],
            status=payload.get("status") or "TODO",
            priority=payload.get("priority") or "LOW",
            description=payload.get("description"),
            minutes_ago=-len(self.tasks) - 1,
        )
        self.tasks.append(item)
        return item

    async def update_task(self, task_id: str, payload: dict) -> TaskItem:
        self.calls.append(("update_task", (task_id, payload)))
        self._maybe_fail()
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                fields = {
                    "title": payload.get("title", task.title),
                    "status": payload.get("status", task.status),
                    "priority": payload.get("priority", task.priority),
                    "description": payload.get("description", task.description),
                }
                self.tasks[index] = TaskItem(
                    id=task.id,
                    created_at=task.created_at,
                    due_date=task.due_date,
                    **fields,
                )
                return self.tasks[index]
        raise ApiError(404, "Not found", "Task not found or access denied")

    async def delete_task(self, task_id: str) -> str:
        self.calls.append(("delete_task", task_id))
        self._maybe_fail()
        remaining = [task for task in self.tasks if task.id != task_id]
        if len(remaining) == len(self.tasks):
            raise ApiError(404, "Not found", "Task not found or access denied")
        self.tasks = remaining
        return "Task deleted successfully"
