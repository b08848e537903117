"""Create the task schema and seed dev tasks from scripts/seed-data.json.

Each entry in "tasks" names an owner_id and the task fields (title,
description, status, priority, due_date, tags, archived). Tasks are created
through TaskService, so ids, timestamps and completed_at follow the same
rules as in production.

Usage:
    uv run python -m scripts.seed_dev_data [path/to/seed-data.json]

Default path: scripts/seed-data.json (relative to project root).
Requires: DATABASE_URL (defaults to a local SQLite file).
"""

from __future__ import annotations

import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from tasktracker.core.config import get_settings
from tasktracker.core.lifespan import task_tracker_lifespan
from tasktracker.domain.entities.task import TaskEntity
from tasktracker.domain.exceptions import TaskTrackerException
from tasktracker.infrastructure.persistence.database import Database
from tasktracker.shared.telemetry import setup_logging
from tasktracker.shared.utils.datetime import ensure_utc


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


def _parse_due_date(s: str | None) -> datetime | None:
    if not s:
        return None
    return ensure_utc(datetime.fromisoformat(s.replace("Z", "+00:00")))


async def run(path: Path) -> None:
    _load_env()
    get_settings.cache_clear()
    settings = get_settings()
    setup_logging()
    data = json.loads(path.read_text(encoding="utf-8"))

    async with Database.from_settings(settings) as db:
        await db.create_schema()
    print(f"Schema ready on {settings.database_url}")

    async with task_tracker_lifespan(settings) as service:
        for item in data.get("tasks", []):
            owner_id = item["owner_id"]
            task = TaskEntity(
                title=item["title"],
                description=item.get("description"),
                status=item.get("status", "pending"),
                priority=item.get("priority", "medium"),
                due_date=_parse_due_date(item.get("due_date")),
                tags=item.get("tags", []),
            )
            try:
                created = await service.create_task(owner_id, task)
                if item.get("archived"):
                    await service.archive_task(owner_id, created.id)
                print(f"  Task {created.title!r} for {owner_id} -> {created.id}")
            except TaskTrackerException as e:
                print(f"  Skip task {item['title']!r}: {e.message}", file=sys.stderr)

    print("Seed completed.")


def main() -> None:
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
