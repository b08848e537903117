"""Pytest configuration and fixtures for the task tracker.

Integration fixtures run against a throwaway SQLite file (aiosqlite) per
test; the schema is created with Database.create_schema(). All imports use
tasktracker.*.
"""

from collections.abc import AsyncIterator, Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from tasktracker.core.config import get_settings
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.infrastructure.persistence.database import Database
from tasktracker.infrastructure.persistence.repositories import (
    TaskQueryRepository,
    TaskRepository,
    TaskStatsRepository,
)

OWNER = "owner-alice"
OTHER_OWNER = "owner-bob"
REPO_OPTIONS = {"write_timeout": 5.0, "query_timeout": 10.0, "telemetry_enabled": True}


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Reload settings for every test so env overrides do not leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def database(tmp_path: Path) -> AsyncIterator[Database]:
    """Opened Database on a fresh SQLite file with the task schema."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'tasks.db'}")
    await db.open()
    await db.create_schema()
    yield db
    await db.close()


@pytest.fixture
def task_repo(database: Database) -> TaskRepository:
    return TaskRepository(database, **REPO_OPTIONS)


@pytest.fixture
def query_repo(database: Database) -> TaskQueryRepository:
    return TaskQueryRepository(database, **REPO_OPTIONS)


@pytest.fixture
def stats_repo(database: Database) -> TaskStatsRepository:
    return TaskStatsRepository(database, **REPO_OPTIONS)


@pytest.fixture
def make_task() -> Callable[..., TaskEntity]:
    """Factory for unsaved tasks owned by OWNER unless overridden."""

    def _make(
        title: str = "Write report",
        *,
        owner_id: str = OWNER,
        due_date: datetime | None = None,
        **fields: Any,
    ) -> TaskEntity:
        return TaskEntity(title=title, owner_id=owner_id, due_date=due_date, **fields)

    return _make


@pytest.fixture
def create_task(
    task_repo: TaskRepository, make_task: Callable[..., TaskEntity]
) -> Callable[..., Any]:
    """Persist a task built by make_task; returns the saved entity."""

    async def _create(title: str = "Write report", **fields: Any) -> TaskEntity:
        task = make_task(title, **fields)
        await task_repo.create(task)
        return task

    return _create
