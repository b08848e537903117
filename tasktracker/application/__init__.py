"""Application layer: DTOs, repository interfaces, services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (SQLAlchemy repositories).
"""

from tasktracker.application.interfaces import (
    ITaskQueryRepository,
    ITaskRepository,
    ITaskStatsRepository,
)
from tasktracker.application.services.task_service import TaskService

__all__ = [
    "ITaskQueryRepository",
    "ITaskRepository",
    "ITaskStatsRepository",
    "TaskService",
]
