"""Application DTOs (no ORM dependency)."""

from tasktracker.application.dtos.task import TaskFilters, TaskPage, TaskStats

__all__ = [
    "TaskFilters",
    "TaskPage",
    "TaskStats",
]
