"""Shared utilities: datetime and id generators."""

from tasktracker.shared.utils.datetime import ensure_utc, to_naive_utc, utc_now
from tasktracker.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "to_naive_utc",
]
