"""
Task Models
===========

SQLAlchemy model and enums for personal tasks.
"""

from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import (
    Date,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin
from app.utils.helpers import format_datetime

if TYPE_CHECKING:
    from app.models.user import User


# =============================================================================
# Enums
# =============================================================================

class TaskStatus(str, Enum):
    """Task progress. Any status may move to any other."""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    """Task priority level."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# =============================================================================
# Models
# =============================================================================

class Task(Base, TimestampMixin):
    """
    Task model.

    A task is visible only to its owner (``user_id``), which is set from
    the session at creation and never changes afterwards.
    """

    __tablename__ = "tasks"

    # Primary Key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Owner
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Task details
    title: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    status: Mapped[TaskStatus] = mapped_column(
        SQLEnum(TaskStatus, name="taskstatus", create_constraint=True),
        nullable=False,
        default=TaskStatus.TODO,
    )
    priority: Mapped[TaskPriority] = mapped_column(
        SQLEnum(TaskPriority, name="taskpriority", create_constraint=True),
        nullable=False,
        default=TaskPriority.LOW,
    )
    # Plain calendar date, no timezone attached
    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="tasks",
    )

    # Indexes
    __table_args__ = (
        Index("idx_task_user_created", "user_id", "created_at"),
        Index("idx_task_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title={self.title[:30]})>"

    def to_api_dict(self) -> dict:
        """
        Serialize to the API response format expected by the frontend.

        Maps internal field names to the camelCase API contract:
            user_id    → userId
            due_date   → dueDate
            created_at → createdAt
        """
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "createdAt": format_datetime(self.created_at),
            "updatedAt": format_datetime(self.updated_at),
        }
