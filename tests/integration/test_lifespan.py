"""End-to-end: task_tracker_lifespan wiring a TaskService over SQLite."""

from datetime import timedelta
from pathlib import Path

import pytest

from tasktracker.application.dtos.task import TaskFilters
from tasktracker.core.config import Settings
from tasktracker.core.lifespan import build_task_service, task_tracker_lifespan
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.enums import TaskStatus
from tasktracker.domain.exceptions import TaskNotFoundException
from tasktracker.infrastructure.persistence.database import Database
from tasktracker.shared.utils.datetime import utc_now


@pytest.fixture
async def settings(tmp_path: Path) -> Settings:
    settings = Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'service.db'}",
        task_write_timeout_seconds=2.0,
        task_query_timeout_seconds=4.0,
    )
    async with Database.from_settings(settings) as db:
        await db.create_schema()
    return settings


async def test_service_task_lifecycle(settings: Settings) -> None:
    async with task_tracker_lifespan(settings) as service:
        task = await service.create_task(
            "owner-alice",
            TaskEntity(title="Ship release", tags=["work"], due_date=utc_now() - timedelta(hours=2)),
        )
        assert task.id

        assert [t.id for t in await service.get_overdue_tasks("owner-alice")] == [task.id]

        await service.complete_task("owner-alice", task.id)
        fetched = await service.get_task("owner-alice", task.id)
        assert fetched.status is TaskStatus.COMPLETED
        assert fetched.completed_at is not None
        assert await service.get_overdue_tasks("owner-alice") == []

        await service.reopen_task("owner-alice", task.id)
        assert (await service.get_task("owner-alice", task.id)).completed_at is None

        await service.archive_task("owner-alice", task.id)
        page = await service.list_tasks("owner-alice", filters=TaskFilters(is_archived=True))
        assert [t.id for t in page.tasks] == [task.id]

        stats = await service.get_stats("owner-alice")
        assert (stats.total, stats.pending, stats.archived, stats.overdue) == (1, 1, 1, 1)

        await service.delete_task("owner-alice", task.id)
        with pytest.raises(TaskNotFoundException):
            await service.get_task("owner-alice", task.id)


async def test_service_does_not_cross_owners(settings: Settings) -> None:
    async with task_tracker_lifespan(settings) as service:
        task = await service.create_task("owner-alice", TaskEntity(title="Private"))
        with pytest.raises(TaskNotFoundException):
            await service.get_task("owner-bob", task.id)
        with pytest.raises(TaskNotFoundException):
            await service.delete_task("owner-bob", task.id)
        assert await service.bulk_delete("owner-bob", [task.id]) == 0
        assert (await service.list_tasks("owner-bob")).total == 0


async def test_service_bulk_operations(settings: Settings) -> None:
    async with task_tracker_lifespan(settings) as service:
        ids = [
            (await service.create_task("owner-alice", TaskEntity(title=f"t{i}"))).id
            for i in range(3)
        ]
        assert await service.bulk_change_status("owner-alice", ids + ["missing"], "completed") == 3
        assert (await service.get_stats("owner-alice")).completed == 3
        assert await service.bulk_delete("owner-alice", ids[:2]) == 2
        assert (await service.list_tasks("owner-alice")).total == 1


async def test_explicit_settings_win_over_environment(
    settings: Settings, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A broken environment cannot affect a service built from explicit settings."""
    monkeypatch.setenv("TASK_WRITE_TIMEOUT_SECONDS", "0")
    monkeypatch.setenv("TELEMETRY_ENABLED", "not-a-bool")
    quiet = settings.model_copy(update={"telemetry_enabled": False})

    async with task_tracker_lifespan(quiet) as service:
        task = await service.create_task("owner-alice", TaskEntity(title="Env proof"))
        assert (await service.get_task("owner-alice", task.id)).title == "Env proof"
        assert (await service.get_stats("owner-alice")).total == 1


async def test_build_task_service_applies_settings(settings: Settings) -> None:
    quiet = settings.model_copy(update={"telemetry_enabled": False})
    async with Database.from_settings(quiet) as db:
        service = build_task_service(db, quiet)
    for repo in (service._query_repo, service._task_repo, service._stats_repo):
        assert repo.write_timeout == 2.0
        assert repo.query_timeout == 4.0
        assert repo.telemetry_enabled is False
