"""Persistence models: ORM entities and mixins."""

from tasktracker.infrastructure.persistence.models.mixins import (
    CuidMixin,
    OwnedModel,
    OwnerMixin,
    TimestampMixin,
)
from tasktracker.infrastructure.persistence.models.task import Task, TaskTag

__all__ = [
    "CuidMixin",
    "OwnedModel",
    "OwnerMixin",
    "Task",
    "TaskTag",
    "TimestampMixin",
]
