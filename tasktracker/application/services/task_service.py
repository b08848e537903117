"""Task application service: owner-scoped operations for the inbound layer.

Callers pass the authenticated owner id first; every repository call is
narrowed to that owner, so one user can never read or write another user's
tasks through this service.
"""

from __future__ import annotations

from tasktracker.application.dtos.task import TaskFilters, TaskPage, TaskStats
from tasktracker.application.interfaces.repositories import (
    ITaskQueryRepository,
    ITaskRepository,
    ITaskStatsRepository,
)
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskStatus
from tasktracker.domain.exceptions import ValidationException
from tasktracker.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class TaskService:
    """Owner-scoped facade over the query, mutation and statistics repositories."""

    def __init__(
        self,
        query_repo: ITaskQueryRepository,
        task_repo: ITaskRepository,
        stats_repo: ITaskStatsRepository,
    ) -> None:
        self._query_repo = query_repo
        self._task_repo = task_repo
        self._stats_repo = stats_repo

    async def create_task(self, owner_id: str, task: TaskEntity) -> TaskEntity:
        """Create task for owner_id; return it with id and timestamps assigned."""
        task.owner_id = owner_id
        await self._task_repo.create(task)
        logger.info("Task created id=%s owner=%s", task.id, owner_id)
        return task

    async def get_task(self, owner_id: str, task_id: str) -> TaskEntity:
        """Raises TaskNotFoundException if the owner has no such task."""
        return await self._query_repo.get_by_id(task_id, owner_id=owner_id)

    async def list_tasks(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        filters: TaskFilters | None = None,
    ) -> TaskPage:
        return await self._query_repo.list_by_owner(owner_id, page, limit, filters)

    async def update_task(self, owner_id: str, task: TaskEntity) -> TaskEntity:
        """Replace the task's mutable fields.

        Raises:
            ValidationException: task.owner_id names a different owner.
            TaskNotFoundException: The owner has no task with task.id.
        """
        if task.owner_id and task.owner_id != owner_id:
            raise ValidationException("Task owner cannot be changed", field="owner_id")
        task.owner_id = owner_id
        await self._task_repo.update(task)
        logger.info("Task updated id=%s owner=%s", task.id, owner_id)
        return task

    async def delete_task(self, owner_id: str, task_id: str) -> None:
        await self._task_repo.delete(task_id, owner_id=owner_id)
        logger.info("Task deleted id=%s owner=%s", task_id, owner_id)

    async def change_status(
        self, owner_id: str, task_id: str, status: TaskStatus | str
    ) -> None:
        await self._task_repo.update_status(task_id, status, owner_id=owner_id)
        logger.info(
            "Task status changed id=%s owner=%s status=%s",
            task_id,
            owner_id,
            TaskStatus.parse(status).value,
        )

    async def complete_task(self, owner_id: str, task_id: str) -> None:
        await self.change_status(owner_id, task_id, TaskStatus.COMPLETED)

    async def reopen_task(self, owner_id: str, task_id: str) -> None:
        """Move back to pending; clears completed_at."""
        await self.change_status(owner_id, task_id, TaskStatus.PENDING)

    async def archive_task(self, owner_id: str, task_id: str) -> None:
        await self._task_repo.set_archived(task_id, True, owner_id=owner_id)
        logger.info("Task archived id=%s owner=%s", task_id, owner_id)

    async def unarchive_task(self, owner_id: str, task_id: str) -> None:
        await self._task_repo.set_archived(task_id, False, owner_id=owner_id)
        logger.info("Task unarchived id=%s owner=%s", task_id, owner_id)

    async def bulk_change_status(
        self, owner_id: str, task_ids: list[str], status: TaskStatus | str
    ) -> int:
        """Return how many of task_ids were modified (missing ids are skipped)."""
        modified = await self._task_repo.bulk_update_status(
            task_ids, status, owner_id=owner_id
        )
        logger.info(
            "Bulk status change owner=%s status=%s requested=%s modified=%s",
            owner_id,
            TaskStatus.parse(status).value,
            len(task_ids),
            modified,
        )
        return modified

    async def bulk_delete(self, owner_id: str, task_ids: list[str]) -> int:
        """Return how many of task_ids were deleted (missing ids are skipped)."""
        deleted = await self._task_repo.bulk_delete(task_ids, owner_id=owner_id)
        logger.info(
            "Bulk delete owner=%s requested=%s deleted=%s", owner_id, len(task_ids), deleted
        )
        return deleted

    async def get_stats(self, owner_id: str) -> TaskStats:
        return await self._stats_repo.get_stats(owner_id)

    async def get_overdue_tasks(self, owner_id: str) -> list[TaskEntity]:
        return await self._stats_repo.get_overdue_tasks(owner_id)
