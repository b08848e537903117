"""Task tracker lifespan: startup, wiring and shutdown.

Single place for wiring the repositories onto a shared Database and for
opening/closing that handle. An inbound layer (HTTP, CLI, worker) enters
task_tracker_lifespan() once and hands the yielded TaskService to its handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from tasktracker.application.services.task_service import TaskService
from tasktracker.core.config import Settings, get_settings
from tasktracker.infrastructure.persistence.database import Database
from tasktracker.infrastructure.persistence.repositories import (
    TaskQueryRepository,
    TaskRepository,
    TaskStatsRepository,
)

logger = logging.getLogger(__name__)


def build_task_service(database: Database, settings: Settings | None = None) -> TaskService:
    """Wire the three task repositories onto one shared Database.

    Deadlines and the telemetry switch come from settings, so no repository
    reads the environment once built.
    """
    settings = settings or get_settings()
    options = {
        "write_timeout": settings.task_write_timeout_seconds,
        "query_timeout": settings.task_query_timeout_seconds,
        "telemetry_enabled": settings.telemetry_enabled,
    }
    return TaskService(
        query_repo=TaskQueryRepository(database, **options),
        task_repo=TaskRepository(database, **options),
        stats_repo=TaskStatsRepository(database, **options),
    )


@asynccontextmanager
async def task_tracker_lifespan(
    settings: Settings | None = None,
) -> AsyncIterator[TaskService]:
    """Open the database, yield a wired TaskService, and close on exit.

    The schema must already exist (see Database.create_schema for development).
    """
    settings = settings or get_settings()
    database = Database.from_settings(settings)

    # ---- Startup ----
    await database.open()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    try:
        yield build_task_service(database, settings)
    finally:
        # ---- Shutdown ----
        await database.close()
        logger.info("%s stopped", settings.app_name)
