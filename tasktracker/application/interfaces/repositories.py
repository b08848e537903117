"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities and application DTOs only; no infrastructure imports.

Every method accepts timeout= (seconds) to override the configured deadline and
raises PersistenceException, OperationTimeoutException or
OperationCanceledException on storage failure, expiry or cancellation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from tasktracker.domain.enums import TaskStatus

if TYPE_CHECKING:
    from tasktracker.application.dtos.task import TaskFilters, TaskPage, TaskStats
    from tasktracker.domain.entities.task import TaskEntity


# Task query interface (reads)
class ITaskQueryRepository(Protocol):
    """Protocol for owner-scoped task reads."""

    async def get_by_id(
        self,
        task_id: str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> TaskEntity:
        """Return task by ID (within owner when given). Raises TaskNotFoundException."""

    async def list_by_owner(
        self,
        owner_id: str,
        page: int = 1,
        limit: int = 10,
        filters: TaskFilters | None = None,
        *,
        timeout: float | None = None,
    ) -> TaskPage:
        """Return one page of the owner's tasks (newest first) and the filtered total."""


# Task mutation interface
class ITaskRepository(Protocol):
    """Protocol for task writes. Not-found is detected from matched row counts."""

    async def create(self, task: TaskEntity, *, timeout: float | None = None) -> str:
        """Assign identity via prepare_for_create, persist, and return the new id."""

    async def update(self, task: TaskEntity, *, timeout: float | None = None) -> None:
        """Replace all mutable fields. Raises TaskNotFoundException if unmatched."""

    async def delete(
        self, task_id: str, *, owner_id: str | None = None, timeout: float | None = None
    ) -> None:
        """Hard delete. Raises TaskNotFoundException if nothing was removed."""

    async def update_status(
        self,
        task_id: str,
        status: TaskStatus | str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Set status and keep completed_at coupled. Raises TaskNotFoundException if unmatched."""

    async def set_archived(
        self,
        task_id: str,
        archived: bool,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Set is_archived. Raises TaskNotFoundException if unmatched."""

    async def bulk_update_status(
        self,
        task_ids: list[str],
        status: TaskStatus | str,
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> int:
        """Set status on every matching id; return the number of tasks modified."""

    async def bulk_delete(
        self,
        task_ids: list[str],
        *,
        owner_id: str | None = None,
        timeout: float | None = None,
    ) -> int:
        """Delete every matching id; return the number of tasks removed."""


# Task statistics interface
class ITaskStatsRepository(Protocol):
    """Protocol for per-owner aggregates and the overdue work list."""

    async def get_stats(self, owner_id: str, *, timeout: float | None = None) -> TaskStats:
        """Return status breakdown plus archived and overdue counts (three round trips)."""

    async def get_overdue_tasks(
        self, owner_id: str, *, timeout: float | None = None
    ) -> list[TaskEntity]:
        """Return non-archived overdue tasks, soonest due first."""
