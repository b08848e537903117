"""Domain layer: entities, enums, and exceptions.

No dependencies on infrastructure or presentation. Used by application
and infrastructure layers.
"""

from tasktracker.domain.entities import TaskEntity
from tasktracker.domain.enums import TaskPriority, TaskStatus
from tasktracker.domain.exceptions import (
    OperationCanceledException,
    OperationTimeoutException,
    PersistenceException,
    ResourceNotFoundException,
    TaskNotFoundException,
    TaskTrackerException,
    ValidationException,
)

__all__ = [
    # Entities
    "TaskEntity",
    # Enums
    "TaskPriority",
    "TaskStatus",
    # Exceptions
    "OperationCanceledException",
    "OperationTimeoutException",
    "PersistenceException",
    "ResourceNotFoundException",
    "TaskNotFoundException",
    "TaskTrackerException",
    "ValidationException",
]
