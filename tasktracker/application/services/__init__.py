"""Application services."""

from tasktracker.application.services.task_service import TaskService

__all__ = ["TaskService"]
