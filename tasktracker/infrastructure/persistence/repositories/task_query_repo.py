"""Task query repository: owner-scoped reads with filtering and pagination."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.application.dtos.task import TaskFilters, TaskPage
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskPriority, TaskStatus
from tasktracker.domain.exceptions import TaskNotFoundException, ValidationException
from tasktracker.infrastructure.persistence.models.task import Task
from tasktracker.infrastructure.persistence.repositories.base import BaseRepository
from tasktracker.infrastructure.persistence.repositories.task_filters import (
    build_task_conditions,
    owner_condition,
)
from tasktracker.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


def task_to_entity(t: Task) -> TaskEntity:
    """Map Task ORM row (with loaded tags) to TaskEntity."""
    return TaskEntity(
        id=t.id,
        owner_id=t.owner_id,
        title=t.title,
        description=t.description,
        status=TaskStatus(t.status),
        priority=TaskPriority(t.priority),
        due_date=t.due_date,
        tags=t.tags,
        is_archived=t.is_archived,
        created_at=t.created_at,
        updated_at=t.updated_at,
        completed_at=t.completed_at,
    )


class TaskQueryRepository(BaseRepository):
    """Task reads. Implements ITaskQueryRepository."""

    @traced("task.get_by_id")
    async def get_by_id(
        self,
        task_id: str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> TaskEntity:
        """Return task by ID, restricted to owner_id when given.

        Raises:
            TaskNotFoundException: No task with that id (for that owner).
        """

        async def work(session: AsyncSession) -> TaskEntity:
            stmt = select(Task).where(Task.id == task_id)
            if owner_id is not None:
                stmt = stmt.where(owner_condition(owner_id))
            row = (await session.execute(stmt)).scalar_one_or_none()
            if row is None:
                raise TaskNotFoundException(task_id)
            return task_to_entity(row)

        return await self._run(
            "task.get_by_id",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=task_id,
            owner_id=owner_id,
        )

    @traced("task.list_by_owner")
    async def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        filters: TaskFilters | None = None,
        *,
        timeout: float | None = None,
    ) -> TaskPage:
        """Return one page of the owner's tasks, newest first.

        total counts every task matching the filters, independent of page and
        limit. A page past the end yields no tasks and the same total. Count
        and page are read in one transaction.

        Raises:
            ValidationException: page < 1, limit < 1, or an unknown status/priority filter.
        """
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if limit < 1:
            raise ValidationException("limit must be > 0", field="limit")
        conditions = build_task_conditions(owner_id, filters)
        skip = (page - 1) * limit

        async def work(session: AsyncSession) -> TaskPage:
            total = (
                await session.execute(select(func.count(Task.id)).where(*conditions))
            ).scalar() or 0
            result = await session.execute(
                select(Task)
                .where(*conditions)
                .order_by(Task.created_at.desc(), Task.id.desc())
                .offset(skip)
                .limit(limit)
            )
            tasks = [task_to_entity(t) for t in result.scalars().all()]
            return TaskPage(tasks=tasks, total=total, page=page, limit=limit)

        result = await self._run(
            "task.list_by_owner",
            work,
            timeout=self.query_timeout if timeout is None else timeout,
            owner_id=owner_id,
            page=page,
            limit=limit,
        )
        add_span_attributes(**{"task.total": result.total, "task.returned": len(result.tasks)})
        logger.debug(
            "Listed tasks owner=%s page=%s limit=%s returned=%s total=%s",
            owner_id,
            page,
            limit,
            len(result.tasks),
            result.total,
        )
        return result
