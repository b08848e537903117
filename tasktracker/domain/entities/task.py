"""Task domain entity.

Represents a user's task independent of persistence. Lifecycle methods keep
completed_at coupled to status: set on the transition into COMPLETED,
cleared on every transition away from it.
"""

from dataclasses import dataclass, field
from datetime import datetime

from tasktracker.domain.enums import TaskPriority, TaskStatus
from tasktracker.domain.exceptions import ValidationException
from tasktracker.shared.utils.datetime import ensure_utc, utc_now
from tasktracker.shared.utils.generators import generate_cuid


@dataclass
class TaskEntity:
    """Domain entity for a task (business rules separate from persistence).

    id and owner_id are empty until prepare_for_create assigns them; neither
    is written again by any update path. Status and priority accept their
    string values and are coerced on construction.
    """

    title: str
    owner_id: str = ""
    id: str = ""
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    tags: list[str] = field(default_factory=list)
    is_archived: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        self.status = TaskStatus.parse(self.status)
        self.priority = TaskPriority.parse(self.priority)
        self.due_date = ensure_utc(self.due_date)
        self.tags = list(self.tags)

    def prepare_for_create(self, owner_id: str) -> None:
        """Assign identity, owner and timestamps for a new task.

        Args:
            owner_id: Authenticated owner; required.

        Raises:
            ValidationException: If owner_id is empty.
        """
        if not owner_id:
            raise ValidationException("Task must belong to an owner", field="owner_id")
        now = utc_now()
        self.id = generate_cuid()
        self.owner_id = owner_id
        self.created_at = now
        self.updated_at = now
        self.is_archived = False
        self._sync_completed_at(now)

    def prepare_for_update(self) -> None:
        """Refresh updated_at and re-establish the completed_at invariant."""
        now = utc_now()
        self.updated_at = now
        self._sync_completed_at(now)

    def transition_to(self, status: TaskStatus | str) -> None:
        """Move to status, setting or clearing completed_at accordingly."""
        now = utc_now()
        self.status = TaskStatus.parse(status)
        self.completed_at = now if self.status is TaskStatus.COMPLETED else None
        self.updated_at = now

    def mark_as_completed(self) -> None:
        self.transition_to(TaskStatus.COMPLETED)

    def mark_as_pending(self) -> None:
        """Reopen the task."""
        self.transition_to(TaskStatus.PENDING)

    def archive(self) -> None:
        self.is_archived = True
        self.updated_at = utc_now()

    def unarchive(self) -> None:
        self.is_archived = False
        self.updated_at = utc_now()

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Return whether the due date has passed and the task is not completed.

        Archival does not affect this predicate.

        Args:
            now: Reference time; defaults to the current UTC time.
        """
        if self.due_date is None or self.status is TaskStatus.COMPLETED:
            return False
        return self.due_date < (now or utc_now())

    def _sync_completed_at(self, now: datetime) -> None:
        if self.status is TaskStatus.COMPLETED:
            if self.completed_at is None:
                self.completed_at = now
        else:
            self.completed_at = None
