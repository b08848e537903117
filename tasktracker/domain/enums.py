"""Domain enumerations for the task tracker.

Enums represent fixed sets of domain values (task status and priority).
Values are the persisted strings; do not rename them.
"""

from enum import Enum

from tasktracker.domain.exceptions import ValidationException


class TaskStatus(str, Enum):
    """Task lifecycle status.

    Only COMPLETED carries a completion timestamp; every other status clears it.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings.

        Returns:
            List of enum value strings (e.g. for validation or serialization).
        """
        return [status.value for status in cls]

    @classmethod
    def parse(cls, raw: "TaskStatus | str", field: str = "status") -> "TaskStatus":
        """Coerce a raw value into a TaskStatus.

        Args:
            raw: Enum member or its string value.
            field: Field name reported on failure.

        Returns:
            The matching TaskStatus.

        Raises:
            ValidationException: If raw is not a known status.
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            raise ValidationException(
                f"Invalid status {raw!r}; expected one of {cls.values()}",
                field=field,
            ) from None


class TaskPriority(str, Enum):
    """Task priority, ordered LOW < MEDIUM < HIGH < URGENT (see rank)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"

    @property
    def rank(self) -> int:
        """Sort weight: 1 for LOW up to 4 for URGENT."""
        return _PRIORITY_RANK[self]

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid priority values as strings."""
        return [priority.value for priority in cls]

    @classmethod
    def parse(cls, raw: "TaskPriority | str", field: str = "priority") -> "TaskPriority":
        """Coerce a raw value into a TaskPriority. Raises ValidationException if unknown."""
        if isinstance(raw, cls):
            return raw
        try:
            return cls(raw)
        except ValueError:
            raise ValidationException(
                f"Invalid priority {raw!r}; expected one of {cls.values()}",
                field=field,
            ) from None


_PRIORITY_RANK = {
    TaskPriority.LOW: 1,
    TaskPriority.MEDIUM: 2,
    TaskPriority.HIGH: 3,
    TaskPriority.URGENT: 4,
}
