"""
User Model
==========

SQLAlchemy model for user accounts.

Rows are written only by the auth provider service; the task API reads
nothing from here beyond the owner foreign key.
"""

from typing import TYPE_CHECKING, Optional
import uuid

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, TimestampMixin

if TYPE_CHECKING:
    from app.models.task import Task


class User(Base, TimestampMixin):
    """
    User account model.

    Stores identity and profile information owned by the auth provider.
    """

    __tablename__ = "users"

    # Primary Key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Account fields
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password_hash: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )

    # Profile fields
    name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Relationships
    tasks: Mapped[list["Task"]] = relationship(
        "Task",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"

    def to_api_dict(self) -> dict:
        """Public profile fields."""
        return {
            "id": str(self.id),
            "name": self.name,
            "email": self.email,
            "image": self.image,
        }
