"""Tests for domain exceptions (error_code, message, details)."""

import asyncio

import pytest

from tasktracker.domain.exceptions import (
    OperationCanceledException,
    OperationTimeoutException,
    PersistenceException,
    ResourceNotFoundException,
    TaskNotFoundException,
    TaskTrackerException,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base TaskTrackerException uses class name as error_code when not provided."""
    exc = TaskTrackerException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "TaskTrackerException"
    assert exc.details == {}


def test_base_exception_custom_error_code_and_details() -> None:
    exc = TaskTrackerException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}
    assert str(exc) == "Oops"


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid status", field="status")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "status"}


def test_validation_exception_without_field() -> None:
    exc = ValidationException("Invalid")
    assert exc.details == {}


def test_task_not_found_is_resource_not_found() -> None:
    """TaskNotFoundException narrows the code but keeps resource details."""
    exc = TaskNotFoundException("task-1")
    assert isinstance(exc, ResourceNotFoundException)
    assert exc.error_code == "TASK_NOT_FOUND"
    assert exc.details == {"resource_type": "task", "resource_id": "task-1"}
    assert "task-1" in exc.message


def test_persistence_exception_carries_operation_and_context() -> None:
    exc = PersistenceException("task.update", "OperationalError", task_id="t1", owner_id="o1")
    assert exc.error_code == "PERSISTENCE_ERROR"
    assert exc.details == {
        "operation": "task.update",
        "reason": "OperationalError",
        "task_id": "t1",
        "owner_id": "o1",
    }
    assert "task.update" in exc.message


def test_operation_timeout_exception() -> None:
    exc = OperationTimeoutException("task.list_by_owner", 10.0)
    assert exc.error_code == "OPERATION_TIMEOUT"
    assert exc.details == {"operation": "task.list_by_owner", "timeout_seconds": 10.0}


def test_operation_canceled_exception_is_cancelled_error() -> None:
    """Cancellation stays visible to asyncio and to domain error handlers."""
    exc = OperationCanceledException("task.delete")
    assert isinstance(exc, asyncio.CancelledError)
    assert isinstance(exc, TaskTrackerException)
    assert exc.error_code == "OPERATION_CANCELED"
    assert exc.details == {"operation": "task.delete"}


@pytest.mark.parametrize(
    "exc",
    [
        ValidationException("bad"),
        TaskNotFoundException("t"),
        PersistenceException("op", "reason"),
        OperationTimeoutException("op", 1.0),
    ],
)
def test_all_inherit_from_base(exc: TaskTrackerException) -> None:
    assert isinstance(exc, TaskTrackerException)
