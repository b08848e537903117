"""Domain exceptions for the task tracker.

Defines the error taxonomy raised by the task engines. These exceptions are
independent of any transport; an inbound layer maps error_code to its own
status codes (RESOURCE_NOT_FOUND/TASK_NOT_FOUND to 404, PERSISTENCE_ERROR to
5xx, and so on).
"""

import asyncio
from typing import Any


class TaskTrackerException(Exception):
    """Base exception for all task tracker errors.

    All custom exceptions should inherit from this class to allow
    consistent error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, task_id, operation).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(TaskTrackerException):
    """Raised when a value is structurally invalid (e.g. unknown status string)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(TaskTrackerException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'task').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class TaskNotFoundException(ResourceNotFoundException):
    """Raised when an id-scoped read, update or delete matched no task."""

    def __init__(self, task_id: str) -> None:
        super().__init__("task", task_id)
        self.error_code = "TASK_NOT_FOUND"


class PersistenceException(TaskTrackerException):
    """Raised when the underlying storage call failed.

    The original driver error is chained as __cause__; details name the
    failing operation and the ids involved.
    """

    def __init__(self, operation: str, reason: str, **context: Any) -> None:
        """Initialize with operation name, reason and optional context.

        Args:
            operation: Repository operation that failed (e.g. 'task.update_status').
            reason: Short description of the underlying failure.
            **context: Extra keys merged into details (e.g. task_id, owner_id).
        """
        super().__init__(
            f"Storage operation '{operation}' failed: {reason}",
            "PERSISTENCE_ERROR",
            {"operation": operation, "reason": reason, **context},
        )


class OperationTimeoutException(TaskTrackerException):
    """Raised when a storage operation exceeded its deadline."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Operation '{operation}' timed out after {timeout_seconds} seconds",
            "OPERATION_TIMEOUT",
            {"operation": operation, "timeout_seconds": timeout_seconds},
        )


class OperationCanceledException(TaskTrackerException, asyncio.CancelledError):
    """Raised when the caller cancelled an in-flight storage operation.

    Also an asyncio.CancelledError, so the enclosing task is still reported
    as cancelled. The operation's transaction has been rolled back.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"Operation '{operation}' was canceled",
            "OPERATION_CANCELED",
            {"operation": operation},
        )
