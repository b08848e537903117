"""TaskQueryRepository integration tests: scoping, filters and pagination."""

from datetime import timedelta

import pytest

from tasktracker.application.dtos.task import TaskFilters
from tasktracker.domain.enums import TaskPriority, TaskStatus
from tasktracker.domain.exceptions import (
    OperationTimeoutException,
    TaskNotFoundException,
    ValidationException,
)
from tasktracker.infrastructure.persistence.repositories import TaskQueryRepository, TaskRepository
from tasktracker.shared.utils.datetime import utc_now

OWNER = "owner-alice"
OTHER_OWNER = "owner-bob"


async def test_get_by_id_missing_raises(query_repo: TaskQueryRepository) -> None:
    with pytest.raises(TaskNotFoundException) as exc_info:
        await query_repo.get_by_id("missing")
    assert exc_info.value.details["resource_id"] == "missing"


async def test_get_by_id_owner_scoped(create_task, query_repo: TaskQueryRepository) -> None:
    created = await create_task()
    assert (await query_repo.get_by_id(created.id, owner_id=OWNER)).id == created.id
    with pytest.raises(TaskNotFoundException):
        await query_repo.get_by_id(created.id, owner_id=OTHER_OWNER)


async def test_zero_timeout_is_not_replaced_by_default(
    create_task, query_repo: TaskQueryRepository
) -> None:
    created = await create_task()
    with pytest.raises(OperationTimeoutException) as exc_info:
        await query_repo.get_by_id(created.id, timeout=0)
    assert exc_info.value.details == {"operation": "task.get_by_id", "timeout_seconds": 0}


async def test_list_is_owner_isolated(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task("mine 1")
    await create_task("mine 2")
    await create_task("theirs", owner_id=OTHER_OWNER)

    mine = await query_repo.list_by_owner(OWNER)
    assert mine.total == 2
    assert {t.title for t in mine.tasks} == {"mine 1", "mine 2"}
    assert all(t.owner_id == OWNER for t in mine.tasks)

    theirs = await query_repo.list_by_owner(OTHER_OWNER)
    assert [t.title for t in theirs.tasks] == ["theirs"]


async def test_list_orders_newest_first(create_task, query_repo: TaskQueryRepository) -> None:
    for title in ("first", "second", "third"):
        await create_task(title)
    result = await query_repo.list_by_owner(OWNER)
    assert [t.title for t in result.tasks] == ["third", "second", "first"]


async def test_pagination_total_is_page_independent(
    create_task, query_repo: TaskQueryRepository
) -> None:
    for i in range(5):
        await create_task(f"task {i}")

    pages = [await query_repo.list_by_owner(OWNER, page=p, limit=2) for p in (1, 2, 3)]
    assert [p.total for p in pages] == [5, 5, 5]
    assert [len(p.tasks) for p in pages] == [2, 2, 1]
    ids = [t.id for p in pages for t in p.tasks]
    assert len(set(ids)) == 5
    assert pages[0].has_next is True
    assert pages[2].has_next is False


async def test_pagination_is_repeatable(create_task, query_repo: TaskQueryRepository) -> None:
    for i in range(4):
        await create_task(f"task {i}")
    first = await query_repo.list_by_owner(OWNER, page=2, limit=2)
    again = await query_repo.list_by_owner(OWNER, page=2, limit=2)
    assert [t.id for t in first.tasks] == [t.id for t in again.tasks]


async def test_page_past_end_is_empty(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task()
    result = await query_repo.list_by_owner(OWNER, page=9, limit=10)
    assert result.tasks == []
    assert result.total == 1


@pytest.mark.parametrize(("page", "limit"), [(0, 10), (1, 0), (-1, 5)])
async def test_invalid_paging_rejected(query_repo: TaskQueryRepository, page: int, limit: int) -> None:
    with pytest.raises(ValidationException):
        await query_repo.list_by_owner(OWNER, page=page, limit=limit)


async def test_filter_by_status_and_priority(
    create_task, task_repo: TaskRepository, query_repo: TaskQueryRepository
) -> None:
    done = await create_task("done", priority=TaskPriority.HIGH)
    await task_repo.update_status(done.id, TaskStatus.COMPLETED)
    await create_task("open high", priority=TaskPriority.HIGH)
    await create_task("open low", priority=TaskPriority.LOW)

    completed = await query_repo.list_by_owner(OWNER, filters=TaskFilters(status="completed"))
    assert [t.title for t in completed.tasks] == ["done"]

    high_pending = await query_repo.list_by_owner(
        OWNER, filters=TaskFilters(status=TaskStatus.PENDING, priority="high")
    )
    assert [t.title for t in high_pending.tasks] == ["open high"]


async def test_unknown_status_filter_rejected(query_repo: TaskQueryRepository) -> None:
    with pytest.raises(ValidationException):
        await query_repo.list_by_owner(OWNER, filters=TaskFilters(status="done"))


async def test_filter_tags_matches_any(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task("work urgent", tags=["work", "urgent"])
    await create_task("home", tags=["home"])
    await create_task("untagged")

    either = await query_repo.list_by_owner(OWNER, filters=TaskFilters(tags=["urgent", "home", "work"]))
    assert either.total == 2
    assert {t.title for t in either.tasks} == {"work urgent", "home"}

    only_work = await query_repo.list_by_owner(OWNER, filters=TaskFilters(tags=["work"]))
    assert [t.title for t in only_work.tasks] == ["work urgent"]


async def test_filter_archived(
    create_task, task_repo: TaskRepository, query_repo: TaskQueryRepository
) -> None:
    archived = await create_task("archived")
    await task_repo.set_archived(archived.id, True)
    await create_task("active")

    result = await query_repo.list_by_owner(OWNER, filters=TaskFilters(is_archived=True))
    assert [t.title for t in result.tasks] == ["archived"]
    result = await query_repo.list_by_owner(OWNER, filters=TaskFilters(is_archived=False))
    assert [t.title for t in result.tasks] == ["active"]
    assert (await query_repo.list_by_owner(OWNER)).total == 2


async def test_filter_due_range_is_inclusive(create_task, query_repo: TaskQueryRepository) -> None:
    base = utc_now().replace(microsecond=0)
    await create_task("early", due_date=base)
    await create_task("middle", due_date=base + timedelta(days=1))
    await create_task("late", due_date=base + timedelta(days=2))
    await create_task("no due")

    result = await query_repo.list_by_owner(
        OWNER,
        filters=TaskFilters(due_after=base, due_before=base + timedelta(days=1)),
    )
    assert {t.title for t in result.tasks} == {"early", "middle"}

    before = await query_repo.list_by_owner(OWNER, filters=TaskFilters(due_before=base))
    assert [t.title for t in before.tasks] == ["early"]


async def test_search_title_or_description_case_insensitive(
    create_task, query_repo: TaskQueryRepository
) -> None:
    await create_task("Quarterly REPORT")
    await create_task("Groceries", description="buy paper for the report")
    await create_task("Unrelated")

    result = await query_repo.list_by_owner(OWNER, filters=TaskFilters(search="report"))
    assert {t.title for t in result.tasks} == {"Quarterly REPORT", "Groceries"}


async def test_search_is_literal(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task("100% done")
    await create_task("1000 items")

    result = await query_repo.list_by_owner(OWNER, filters=TaskFilters(search="0%"))
    assert [t.title for t in result.tasks] == ["100% done"]


async def test_search_folds_non_ascii_case(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task("École réunion")
    await create_task("Notes", description="Treffen in der STRASSE, ÜBER alles")
    await create_task("Ecole without accent")

    accented = await query_repo.list_by_owner(OWNER, filters=TaskFilters(search="école"))
    assert [t.title for t in accented.tasks] == ["École réunion"]
    assert accented.total == 1

    upper = await query_repo.list_by_owner(OWNER, filters=TaskFilters(search="RÉUNION"))
    assert upper.total == 1

    in_description = await query_repo.list_by_owner(OWNER, filters=TaskFilters(search="über"))
    assert [t.title for t in in_description.tasks] == ["Notes"]


async def test_filters_combine_with_and(create_task, query_repo: TaskQueryRepository) -> None:
    await create_task("report draft", tags=["work"], priority=TaskPriority.HIGH)
    await create_task("report final", tags=["work"], priority=TaskPriority.LOW)
    await create_task("report home", tags=["home"], priority=TaskPriority.HIGH)

    result = await query_repo.list_by_owner(
        OWNER, filters=TaskFilters(tags=["work"], priority="high", search="report")
    )
    assert [t.title for t in result.tasks] == ["report draft"]
    assert result.total == 1
