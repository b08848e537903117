"""SQLAlchemy mixins for common model patterns.

Provides: CuidMixin, OwnerMixin, TimestampMixin and the combined OwnedModel.
Identity and timestamps are assigned by the domain entity, so none of these
columns carry server defaults.
"""

from datetime import datetime

from sqlalchemy import String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from tasktracker.infrastructure.persistence.types import UTCDateTime


class CuidMixin:
    """Mixin for models keyed by a CUID string assigned before insert."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String(64), primary_key=True)


class OwnerMixin:
    """Mixin for owner-scoped models. owner_id is written once, at insert."""

    @declared_attr
    def owner_id(cls) -> Mapped[str]:
        return mapped_column(String(64), nullable=False, index=True)


class TimestampMixin:
    """Mixin for created_at and updated_at (timezone-aware UTC, set by the caller)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(UTCDateTime(), nullable=False)

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(UTCDateTime(), nullable=False)


class OwnedModel(CuidMixin, OwnerMixin, TimestampMixin):
    """Combined mixin: CUID + owner_id + created_at/updated_at."""

    __abstract__ = True
