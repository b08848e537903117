"""Task ORM models. Table: task, with ordered tags in task_tag."""

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tasktracker.infrastructure.persistence.database import Base
from tasktracker.infrastructure.persistence.models.mixins import OwnedModel
from tasktracker.infrastructure.persistence.types import UTCDateTime


class TaskTag(Base):
    """One tag of a task; position keeps the display order. Table: task_tag."""

    __tablename__ = "task_tag"

    task_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("task.id", ondelete="CASCADE"), primary_key=True
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    tag: Mapped[str] = mapped_column(String(100), nullable=False)

    __table_args__ = (Index("ix_task_tag_tag", "tag"),)


class Task(OwnedModel, Base):
    """Owner-scoped task record. Table: task.

    status and priority hold the enum string values. completed_at is non-null
    iff status is 'completed'.
    """

    __tablename__ = "task"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    due_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True, index=True
    )
    is_archived: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    completed_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)

    tag_rows: Mapped[list[TaskTag]] = relationship(
        order_by=TaskTag.position,
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_task_owner_status", "owner_id", "status"),
        Index("ix_task_owner_created", "owner_id", "created_at"),
        Index("ix_task_owner_archived", "owner_id", "is_archived"),
        Index("ix_task_owner_priority_due", "owner_id", "priority", "due_date"),
    )

    @property
    def tags(self) -> list[str]:
        return [row.tag for row in self.tag_rows]
