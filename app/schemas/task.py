"""
Task Schemas
============

Pydantic schemas for the task endpoints.

Request payloads use the client's camelCase names (``dueDate``). Fields
the API does not know about, including ``userId``, are ignored: the owner
always comes from the session.
"""

from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.task import TaskPriority, TaskStatus
from app.utils.validators import (
    validate_description,
    validate_due_date,
    validate_priority,
    validate_status,
    validate_title,
)


# =============================================================================
# Request Schemas
# =============================================================================

class TaskCreate(BaseModel):
    """Request schema for creating a task."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = Field(default="", validate_default=True)
    description: Optional[str] = None
    priority: TaskPriority = TaskPriority.LOW
    status: TaskStatus = TaskStatus.TODO
    due_date: Optional[date] = Field(default=None, alias="dueDate")

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return validate_title(v, required=True)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> Optional[str]:
        return validate_description(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> TaskPriority:
        # null or "" falls back to the default, like an omitted field
        return TaskPriority.LOW if v is None or v == "" else validate_priority(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> TaskStatus:
        return TaskStatus.TODO if v is None or v == "" else validate_status(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Optional[date]:
        return validate_due_date(v)


class TaskUpdate(BaseModel):
    """
    Request schema for updating a task.

    Merge semantics: only fields present in the payload are written;
    omitted fields keep their current values. ``description`` and
    ``dueDate`` may be sent as null to clear them.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = Field(default=None, alias="dueDate")

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v: Any) -> str:
        return validate_title(v, required=False)

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> Optional[str]:
        return validate_description(v)

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, v: Any) -> TaskPriority:
        return validate_priority(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v: Any) -> TaskStatus:
        return validate_status(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v: Any) -> Optional[date]:
        return validate_due_date(v)

    def changes(self) -> dict[str, Any]:
        """Model attribute values for the fields the client actually sent."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# =============================================================================
# Response Schemas
# =============================================================================

class TaskApiResponse(BaseModel):
    """
    Response schema for a task.

    Uses camelCase field names to match the frontend contract.
    """

    id: str
    userId: str
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    dueDate: Optional[str] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class TaskEnvelope(BaseModel):
    """Single task response: ``{"task": {...}}``."""

    task: TaskApiResponse


class TaskListEnvelope(BaseModel):
    """Task list response: ``{"tasks": [...]}``, newest first."""

    tasks: list[TaskApiResponse] = []


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str
