"""Task statistics repository: per-owner counts and the overdue work list."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.application.dtos.task import TaskStats
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskStatus
from tasktracker.infrastructure.persistence.models.task import Task
from tasktracker.infrastructure.persistence.repositories.base import BaseRepository
from tasktracker.infrastructure.persistence.repositories.task_filters import (
    overdue_condition,
    owner_condition,
)
from tasktracker.infrastructure.persistence.repositories.task_query_repo import (
    task_to_entity,
)
from tasktracker.shared.telemetry.tracing import traced
from tasktracker.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class TaskStatsRepository(BaseRepository):
    """Aggregates over one owner's tasks. Implements ITaskStatsRepository."""

    @traced("task.get_stats")
    async def get_stats(self, owner_id: str, *, timeout: float | None = None) -> TaskStats:
        """Return the status breakdown plus archived and overdue counts.

        Three queries, whatever the number of tasks: one GROUP BY status, one
        archived count, one overdue count. Archived tasks are included in the
        status buckets and in overdue.
        """
        now = utc_now()

        async def work(session: AsyncSession) -> TaskStats:
            by_status = dict(
                (
                    await session.execute(
                        select(Task.status, func.count(Task.id))
                        .where(owner_condition(owner_id))
                        .group_by(Task.status)
                    )
                ).all()
            )
            archived = (
                await session.execute(
                    select(func.count(Task.id)).where(
                        owner_condition(owner_id), Task.is_archived.is_(True)
                    )
                )
            ).scalar() or 0
            overdue = (
                await session.execute(
                    select(func.count(Task.id)).where(
                        owner_condition(owner_id), overdue_condition(now)
                    )
                )
            ).scalar() or 0
            return TaskStats(
                total=sum(by_status.values()),
                pending=by_status.get(TaskStatus.PENDING.value, 0),
                in_progress=by_status.get(TaskStatus.IN_PROGRESS.value, 0),
                completed=by_status.get(TaskStatus.COMPLETED.value, 0),
                cancelled=by_status.get(TaskStatus.CANCELLED.value, 0),
                archived=archived,
                overdue=overdue,
            )

        return await self._run(
            "task.get_stats",
            work,
            timeout=self.query_timeout if timeout is None else timeout,
            owner_id=owner_id,
        )

    @traced("task.get_overdue_tasks")
    async def get_overdue_tasks(
        self, owner_id: str, *, timeout: float | None = None
    ) -> list[TaskEntity]:
        """Return the owner's overdue, non-archived tasks, soonest due first.

        Unlike TaskStats.overdue this list leaves archived tasks out.
        """
        now = utc_now()

        async def work(session: AsyncSession) -> list[TaskEntity]:
            result = await session.execute(
                select(Task)
                .where(
                    owner_condition(owner_id),
                    overdue_condition(now),
                    Task.is_archived.is_(False),
                )
                .order_by(Task.due_date.asc(), Task.created_at.asc())
            )
            return [task_to_entity(t) for t in result.scalars().all()]

        tasks = await self._run(
            "task.get_overdue_tasks",
            work,
            timeout=self.query_timeout if timeout is None else timeout,
            owner_id=owner_id,
        )
        logger.debug("Overdue tasks owner=%s count=%s", owner_id, len(tasks))
        return tasks
