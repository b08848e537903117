"""Task repository: create, replace, status transitions, archival and deletes.

Existence is never checked with a separate read. Each id-scoped write is a
single UPDATE or DELETE whose matched row count is the not-found signal, so
there is no window between check and write. Bulk variants report the count
instead of failing on misses.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from sqlalchemy import ColumnElement, case, delete, insert, literal, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskStatus
from tasktracker.domain.exceptions import TaskNotFoundException
from tasktracker.infrastructure.persistence.models.task import Task, TaskTag
from tasktracker.infrastructure.persistence.repositories.base import BaseRepository
from tasktracker.infrastructure.persistence.repositories.task_filters import (
    owner_condition,
)
from tasktracker.infrastructure.persistence.types import UTCDateTime
from tasktracker.shared.telemetry.tracing import traced
from tasktracker.shared.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def _scope(
    task_ids: list[str] | str, owner_id: str | None
) -> list[ColumnElement[bool]]:
    """Id (or ids) condition, narrowed to owner_id when given."""
    if isinstance(task_ids, str):
        conditions = [Task.id == task_ids]
    else:
        conditions = [Task.id.in_(task_ids)]
    if owner_id is not None:
        conditions.append(owner_condition(owner_id))
    return conditions


def _status_values(status: TaskStatus, now: datetime) -> dict[str, Any]:
    """Column values for a status transition; completed_at follows status."""
    return {
        "status": status.value,
        "updated_at": now,
        "completed_at": now if status is TaskStatus.COMPLETED else None,
    }


def _tag_rows(task_id: str, tags: list[str]) -> list[dict[str, Any]]:
    return [
        {"task_id": task_id, "position": position, "tag": tag}
        for position, tag in enumerate(tags)
    ]


def _not_before_stored(now: datetime) -> ColumnElement[datetime]:
    """updated_at value that keeps a later stored timestamp instead of now."""
    stamp = literal(now, UTCDateTime())
    return case((Task.updated_at > stamp, Task.updated_at), else_=stamp)


async def _update_matching(
    session: AsyncSession, conditions: list[ColumnElement[bool]], values: dict[str, Any]
) -> int:
    if "updated_at" in values:
        values = {**values, "updated_at": _not_before_stored(values["updated_at"])}
    result = await session.execute(
        update(Task)
        .where(*conditions)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


async def _delete_matching(
    session: AsyncSession, conditions: list[ColumnElement[bool]]
) -> int:
    """Delete matching tasks and their tags; return tasks removed."""
    await session.execute(
        delete(TaskTag)
        .where(TaskTag.task_id.in_(select(Task.id).where(*conditions)))
        .execution_options(synchronize_session=False)
    )
    result = await session.execute(
        delete(Task).where(*conditions).execution_options(synchronize_session=False)
    )
    return result.rowcount


class TaskRepository(BaseRepository):
    """Task writes. Implements ITaskRepository.

    owner_id keyword arguments narrow a write to one owner; a task owned by
    someone else is then indistinguishable from a missing one.
    """

    @traced("task.create")
    async def create(self, task: TaskEntity, *, timeout: float | None = None) -> str:
        """Assign identity (prepare_for_create with task.owner_id) and insert.

        Task and tags are written in one transaction. Identity and timestamps
        are copied onto task only after the commit; a failed create leaves
        task as the caller passed it. Returns the new id.
        """
        staged = replace(task)
        staged.prepare_for_create(task.owner_id)

        async def work(session: AsyncSession) -> str:
            row = Task(
                id=staged.id,
                owner_id=staged.owner_id,
                title=staged.title,
                description=staged.description,
                status=staged.status.value,
                priority=staged.priority.value,
                due_date=staged.due_date,
                is_archived=staged.is_archived,
                created_at=staged.created_at,
                updated_at=staged.updated_at,
                completed_at=staged.completed_at,
                tag_rows=[
                    TaskTag(position=position, tag=tag)
                    for position, tag in enumerate(staged.tags)
                ],
            )
            session.add(row)
            await session.flush()
            return row.id

        task_id = await self._run(
            "task.create",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=staged.id,
            owner_id=staged.owner_id,
        )
        task.id = staged.id
        task.owner_id = staged.owner_id
        task.is_archived = staged.is_archived
        task.created_at = staged.created_at
        task.updated_at = staged.updated_at
        task.completed_at = staged.completed_at
        logger.debug("Task created id=%s owner=%s status=%s", task_id, task.owner_id, task.status.value)
        return task_id

    @traced("task.update")
    async def update(self, task: TaskEntity, *, timeout: float | None = None) -> None:
        """Replace every mutable field of an existing task (scoped by id and owner).

        updated_at is refreshed inside the transaction and never moves behind
        the stored value; completed_at is re-coupled to status through
        prepare_for_update. Tags are replaced as a whole. task receives the
        new timestamps only once the write has committed.

        Raises:
            TaskNotFoundException: No task with task.id for task.owner_id.
        """
        staged = replace(task)

        async def work(session: AsyncSession) -> None:
            staged.prepare_for_update()
            values = {
                "title": staged.title,
                "description": staged.description,
                "status": staged.status.value,
                "priority": staged.priority.value,
                "due_date": staged.due_date,
                "is_archived": staged.is_archived,
                "updated_at": staged.updated_at,
                "completed_at": staged.completed_at,
            }
            matched = await _update_matching(session, _scope(staged.id, staged.owner_id), values)
            if matched == 0:
                raise TaskNotFoundException(staged.id)
            await session.execute(
                delete(TaskTag)
                .where(TaskTag.task_id == staged.id)
                .execution_options(synchronize_session=False)
            )
            if staged.tags:
                await session.execute(insert(TaskTag), _tag_rows(staged.id, staged.tags))

        await self._run(
            "task.update",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=task.id,
            owner_id=task.owner_id,
        )
        task.updated_at = staged.updated_at
        task.completed_at = staged.completed_at

    @traced("task.delete")
    async def delete(
        self, task_id: str, *, owner_id: str | None = None, timeout: float | None = None
    ) -> None:
        """Hard delete (no tombstone).

        Raises:
            TaskNotFoundException: Nothing was removed (missing or already deleted).
        """

        async def work(session: AsyncSession) -> None:
            if await _delete_matching(session, _scope(task_id, owner_id)) == 0:
                raise TaskNotFoundException(task_id)

        await self._run(
            "task.delete",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=task_id,
            owner_id=owner_id,
        )

    @traced("task.update_status")
    async def update_status(
        self,
        task_id: str,
        status: TaskStatus | str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Set status and updated_at; completed_at is set to now for COMPLETED, cleared otherwise.

        Raises:
            ValidationException: Unknown status string (before any storage call).
            TaskNotFoundException: No matching task.
        """
        new_status = TaskStatus.parse(status)

        async def work(session: AsyncSession) -> None:
            values = _status_values(new_status, utc_now())
            if await _update_matching(session, _scope(task_id, owner_id), values) == 0:
                raise TaskNotFoundException(task_id)

        await self._run(
            "task.update_status",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=task_id,
            owner_id=owner_id,
            status=new_status.value,
        )

    @traced("task.set_archived")
    async def set_archived(
        self,
        task_id: str,
        archived: bool,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Archive or unarchive a task; status and completed_at are untouched."""
        async def work(session: AsyncSession) -> None:
            values = {"is_archived": archived, "updated_at": utc_now()}
            if await _update_matching(session, _scope(task_id, owner_id), values) == 0:
                raise TaskNotFoundException(task_id)

        await self._run(
            "task.set_archived",
            work,
            timeout=self.write_timeout if timeout is None else timeout,
            task_id=task_id,
            owner_id=owner_id,
        )

    @traced("task.bulk_update_status")
    async def bulk_update_status(
        self,
        task_ids: list[str],
        status: TaskStatus | str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> int:
        """Apply one status transition to every matching id.

        Returns:
            Number of tasks modified; ids that do not exist are skipped, not errors.
        """
        new_status = TaskStatus.parse(status)
        if not task_ids:
            return 0
        ids = list(dict.fromkeys(task_ids))
        async def work(session: AsyncSession) -> int:
            values = _status_values(new_status, utc_now())
            return await _update_matching(session, _scope(ids, owner_id), values)

        modified = await self._run(
            "task.bulk_update_status",
            work,
            timeout=self.query_timeout if timeout is None else timeout,
            owner_id=owner_id,
            requested=len(ids),
            status=new_status.value,
        )
        logger.debug(
            "Bulk status %s: requested=%s modified=%s", new_status.value, len(ids), modified
        )
        return modified

    @traced("task.bulk_delete")
    async def bulk_delete(
        self,
        task_ids: list[str],
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> int:
        """Delete every matching id.

        Returns:
            Number of tasks removed; ids that do not exist are skipped, not errors.
        """
        if not task_ids:
            return 0
        ids = list(dict.fromkeys(task_ids))

        async def work(session: AsyncSession) -> int:
            return await _delete_matching(session, _scope(ids, owner_id))

        deleted = await self._run(
            "task.bulk_delete",
            work,
            timeout=self.query_timeout if timeout is None else timeout,
            owner_id=owner_id,
            requested=len(ids),
        )
        logger.debug("Bulk delete: requested=%s deleted=%s", len(ids), deleted)
        return deleted
