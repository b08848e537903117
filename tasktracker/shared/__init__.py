"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from tasktracker.shared.utils import (
    ensure_utc,
    generate_cuid,
    to_naive_utc,
    utc_now,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
    "to_naive_utc",
]
