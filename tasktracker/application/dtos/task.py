"""DTOs for task queries and statistics (no dependency on ORM)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime

from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskFilters:
    """Optional, AND-combined predicates for listing an owner's tasks.

    None (or an empty tags list / search string) means "no constraint".
    due_before and due_after are inclusive bounds and may be combined.
    tags matches a task carrying ANY of the listed tags.
    """

    status: TaskStatus | str | None = None
    priority: TaskPriority | str | None = None
    tags: list[str] = field(default_factory=list)
    is_archived: bool | None = None
    due_before: datetime | None = None
    due_after: datetime | None = None
    search: str | None = None


@dataclass(frozen=True)
class TaskPage:
    """One page of an owner's tasks; total is the unpaginated filtered count."""

    tasks: list[TaskEntity]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


@dataclass(frozen=True)
class TaskStats:
    """Per-owner task counts.

    total is the sum of the four status buckets. archived and overdue are
    independent counts; overdue includes archived tasks.
    """

    total: int = 0
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0
    archived: int = 0
    overdue: int = 0
