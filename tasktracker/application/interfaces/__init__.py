"""Application interfaces (ports) implemented by infrastructure."""

from tasktracker.application.interfaces.repositories import (
    ITaskQueryRepository,
    ITaskRepository,
    ITaskStatsRepository,
)

__all__ = [
    "ITaskQueryRepository",
    "ITaskRepository",
    "ITaskStatsRepository",
]
