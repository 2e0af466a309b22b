"""
Task Service
============

Business logic for task CRUD, scoped to a single owner.

Every lookup by id is a single query on ``id AND user_id``: a task that
does not exist and a task owned by someone else are the same outcome.
"""

import logging
from typing import Optional
import uuid

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError
from app.models.task import Task, TaskStatus
from app.schemas.task import TaskCreate, TaskUpdate
from app.utils.helpers import parse_uuid

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_DETAILS = "Task not found or access denied"


class TaskService:
    """Service for task operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_tasks(
        self,
        user_id: uuid.UUID,
        status: Optional[TaskStatus] = None,
        search: Optional[str] = None,
    ) -> list[Task]:
        """
        List the owner's tasks, newest first.

        Args:
            user_id: Owner
            status: Only tasks with this status (None for all)
            search: Case-insensitive substring matched against title or
                description; wildcard characters match literally
        """
        stmt = select(Task).where(Task.user_id == user_id)

        if status is not None:
            stmt = stmt.where(Task.status == status)

        if search:
            stmt = stmt.where(
                or_(
                    Task.title.icontains(search, autoescape=True),
                    Task.description.icontains(search, autoescape=True),
                )
            )

        stmt = stmt.order_by(Task.created_at.desc())
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def get_task(self, task_id: str | uuid.UUID, user_id: uuid.UUID) -> Optional[Task]:
        """Get task by ID ensuring it belongs to user. Malformed ids match nothing."""
        parsed = parse_uuid(task_id)
        if parsed is None:
            return None

        stmt = select(Task).where(
            Task.id == parsed,
            Task.user_id == user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_task_or_404(self, task_id: str | uuid.UUID, user_id: uuid.UUID) -> Task:
        """Like ``get_task`` but raises NotFoundError on a miss."""
        task = await self.get_task(task_id, user_id)
        if task is None:
            raise NotFoundError(details=TASK_NOT_FOUND_DETAILS)
        return task

    async def create_task(
        self,
        user_id: uuid.UUID,
        task_data: TaskCreate,
    ) -> Task:
        """Create a new task owned by ``user_id``."""
        task = Task(
            user_id=user_id,
            title=task_data.title,
            description=task_data.description,
            priority=task_data.priority,
            status=task_data.status,
            due_date=task_data.due_date,
        )
        self.db.add(task)
        await self.db.flush()
        await self.db.refresh(task)

        logger.info("Created task %s for user %s", task.id, user_id)
        return task

    async def update_task(
        self,
        task: Task,
        task_data: TaskUpdate,
    ) -> Task:
        """
        Apply a partial update.

        Only fields present in the payload are written. The owner is never
        part of ``TaskUpdate`` and so can't change. No version check: the
        last write wins.
        """
        for field, value in task_data.changes().items():
            setattr(task, field, value)

        await self.db.flush()
        await self.db.refresh(task)
        return task

    async def delete_task(self, task: Task) -> None:
        """Delete a task permanently."""
        await self.db.delete(task)
        await self.db.flush()
        logger.info("Deleted task %s", task.id)
