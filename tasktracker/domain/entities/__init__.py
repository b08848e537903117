"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from tasktracker.domain.entities.task import TaskEntity

__all__ = [
    "TaskEntity",
]
