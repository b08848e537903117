"""Persistence repositories. Re-exports for dependency injection."""

from tasktracker.infrastructure.persistence.repositories.base import BaseRepository
from tasktracker.infrastructure.persistence.repositories.task_query_repo import (
    TaskQueryRepository,
)
from tasktracker.infrastructure.persistence.repositories.task_repo import TaskRepository
from tasktracker.infrastructure.persistence.repositories.task_stats_repo import (
    TaskStatsRepository,
)

__all__ = [
    "BaseRepository",
    "TaskQueryRepository",
    "TaskRepository",
    "TaskStatsRepository",
]
