"""
UTC datetime utilities for consistent timezone handling.

Task timestamps (created_at, updated_at, completed_at, due_date) are always
timezone-aware UTC. Use these helpers instead of datetime.now().
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Applied to due dates on entry and to every timestamp read back from storage.

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def to_naive_utc(dt: datetime | None) -> datetime | None:
    """
    Convert to UTC and drop tzinfo, for backends without timezone support (SQLite).

    Args:
        dt: A datetime that may be naive (assumed UTC) or aware

    Returns:
        Naive datetime in UTC or None
    """
    aware = ensure_utc(dt)
    return aware.replace(tzinfo=None) if aware is not None else None
