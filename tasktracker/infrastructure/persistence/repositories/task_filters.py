"""Filter composition for task queries.

Translates an owner id plus TaskFilters into a list of SQLAlchemy conditions
that callers AND together. The owner condition is always first; no filter can
widen a query beyond one owner.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ColumnElement, or_, select

from tasktracker.application.dtos.task import TaskFilters
from tasktracker.domain.enums import TaskPriority, TaskStatus
from tasktracker.infrastructure.persistence.models.task import Task, TaskTag

_LIKE_ESCAPE = "\\"


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so text is matched literally."""
    return (
        text.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def owner_condition(owner_id: str) -> ColumnElement[bool]:
    return Task.owner_id == owner_id


def overdue_condition(now: datetime) -> ColumnElement[bool]:
    """Due date in the past and not completed. A NULL due date never matches."""
    return (Task.due_date < now) & (Task.status != TaskStatus.COMPLETED.value)


def tags_any_condition(tags: list[str]) -> ColumnElement[bool]:
    """Task carries at least one of tags."""
    return Task.id.in_(select(TaskTag.task_id).where(TaskTag.tag.in_(tags)))


def search_condition(search: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on title OR description."""
    pattern = f"%{escape_like(search)}%"
    return or_(
        Task.title.ilike(pattern, escape=_LIKE_ESCAPE),
        Task.description.ilike(pattern, escape=_LIKE_ESCAPE),
    )


def build_task_conditions(
    owner_id: str, filters: TaskFilters | None = None
) -> list[ColumnElement[bool]]:
    """Return owner scope plus one condition per supplied filter.

    Raises:
        ValidationException: If filters.status or filters.priority is not a known value.
    """
    conditions = [owner_condition(owner_id)]
    if filters is None:
        return conditions

    if filters.status is not None:
        conditions.append(Task.status == TaskStatus.parse(filters.status).value)
    if filters.priority is not None:
        conditions.append(Task.priority == TaskPriority.parse(filters.priority).value)
    if filters.tags:
        conditions.append(tags_any_condition(list(filters.tags)))
    if filters.is_archived is not None:
        conditions.append(Task.is_archived.is_(filters.is_archived))
    if filters.due_before is not None:
        conditions.append(Task.due_date <= filters.due_before)
    if filters.due_after is not None:
        conditions.append(Task.due_date >= filters.due_after)
    if filters.search:
        conditions.append(search_condition(filters.search))
    return conditions
