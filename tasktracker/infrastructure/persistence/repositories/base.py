"""Base repository: one transaction per operation, bounded by a deadline.

Every public repository method funnels through BaseRepository._run, which
classifies failures into the domain taxonomy:

- asyncio timeout      -> OperationTimeoutException
- caller cancellation  -> OperationCanceledException (still a CancelledError)
- SQLAlchemyError      -> PersistenceException (driver error chained)

Domain exceptions raised by the operation itself (e.g. TaskNotFoundException)
propagate unchanged. The transaction is rolled back in every failure case.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktracker.core.config import get_settings
from tasktracker.domain.exceptions import (
    OperationCanceledException,
    OperationTimeoutException,
    PersistenceException,
)
from tasktracker.infrastructure.persistence.database import Database

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BaseRepository:
    """Base repository holding the shared Database handle, default deadlines
    and the telemetry switch read by the traced decorator.

    Values left as None are taken from get_settings() once, at construction.

    Args:
        database: Opened shared handle (see Database.open).
        write_timeout: Deadline for single-record operations; defaults to
            settings.task_write_timeout_seconds.
        query_timeout: Deadline for paginated, bulk and aggregate operations;
            defaults to settings.task_query_timeout_seconds.
        telemetry_enabled: Wrap operations in spans; defaults to
            settings.telemetry_enabled.
    """

    def __init__(
        self,
        database: Database,
        *,
        write_timeout: float | None = None,
        query_timeout: float | None = None,
        telemetry_enabled: bool | None = None,
    ) -> None:
        self.database = database
        if write_timeout is None or query_timeout is None or telemetry_enabled is None:
            settings = get_settings()
            if write_timeout is None:
                write_timeout = settings.task_write_timeout_seconds
            if query_timeout is None:
                query_timeout = settings.task_query_timeout_seconds
            if telemetry_enabled is None:
                telemetry_enabled = settings.telemetry_enabled
        self.write_timeout = write_timeout
        self.query_timeout = query_timeout
        self.telemetry_enabled = telemetry_enabled

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        *,
        timeout: float,
        **context: Any,
    ) -> T:
        """Run work(session) in its own transaction under timeout seconds.

        Args:
            operation: Name used in logs and exception details (e.g. 'task.delete').
            work: Coroutine function receiving the transactional session.
            timeout: Deadline in seconds.
            **context: Ids and counts recorded on failure (never titles or text).

        Returns:
            Whatever work returns.
        """
        try:
            async with asyncio.timeout(timeout):
                async with self.database.transaction() as session:
                    return await work(session)
        except TimeoutError as exc:
            logger.warning(
                "%s timed out after %ss %s", operation, timeout, _fmt_context(context)
            )
            raise OperationTimeoutException(operation, timeout) from exc
        except asyncio.CancelledError as exc:
            if isinstance(exc, OperationCanceledException):
                raise
            logger.info("%s canceled %s", operation, _fmt_context(context))
            raise OperationCanceledException(operation) from exc
        except SQLAlchemyError as exc:
            logger.error(
                "%s failed %s: %s", operation, _fmt_context(context), exc, exc_info=exc
            )
            raise PersistenceException(
                operation, type(exc).__name__, **context
            ) from exc


def _fmt_context(context: dict[str, Any]) -> str:
    return " ".join(f"{key}={value}" for key, value in context.items())
