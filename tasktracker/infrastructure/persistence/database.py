"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Database is the single shared handle every repository receives at
construction. It owns the engine (and its connection pool) and has an explicit
lifecycle: open() creates the engine on first use, close() disposes it once the
last holder has closed. Nothing here is module-global.

Schema is expected to exist; create_schema() is provided for local development
and tests only.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tasktracker.core.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _register_sqlite_functions(dbapi_connection: Any, connection_record: Any) -> None:
    """Replace SQLite's ASCII-only lower() so ILIKE folds case for all of Unicode."""
    dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


class DatabaseNotOpenError(RuntimeError):
    """Raised when a session is requested from a Database that is not open."""


class Database:
    """Reference-counted owner of the async engine and session factory.

    Each open() must be paired with a close(). Usable as an async context
    manager (open on enter, close on exit).
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: int | None = None,
        max_overflow: int | None = None,
        command_timeout: int | None = None,
    ) -> None:
        self.url = url
        self._echo = echo
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._command_timeout = command_timeout
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._refcount = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        """Build an (unopened) Database from application settings."""
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            command_timeout=settings.db_command_timeout,
        )

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseNotOpenError("Database is not open; call open() first")
        return self._engine

    def _engine_kwargs(self) -> dict[str, Any]:
        """Pool and driver options. Pool sizing applies to PostgreSQL only."""
        kwargs: dict[str, Any] = {"echo": self._echo}
        if "postgresql" in self.url:
            kwargs.update(
                pool_pre_ping=True,
                pool_size=self._pool_size if self._pool_size is not None else 20,
                max_overflow=(
                    self._max_overflow if self._max_overflow is not None else 30
                ),
                pool_recycle=3600,
            )
            if self._command_timeout is not None:
                kwargs["connect_args"] = {"command_timeout": self._command_timeout}
        return kwargs

    async def open(self) -> Database:
        """Acquire a reference, creating the engine on the first call."""
        if self._engine is None:
            self._engine = create_async_engine(self.url, **self._engine_kwargs())
            if self._engine.dialect.name == "sqlite":
                event.listen(self._engine.sync_engine, "connect", _register_sqlite_functions)
            self._sessionmaker = async_sessionmaker(
                bind=self._engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
            logger.info("Database engine created (dialect=%s)", self._engine.dialect.name)
        self._refcount += 1
        return self

    async def close(self) -> None:
        """Release a reference; dispose the engine when none remain."""
        if self._refcount == 0:
            return
        self._refcount -= 1
        if self._refcount == 0 and self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("Database engine disposed")

    async def __aenter__(self) -> Database:
        return await self.open()

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session for reads. Does not commit."""
        if self._sessionmaker is None:
            raise DatabaseNotOpenError("Database is not open; call open() first")
        async with self._sessionmaker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncSession]:
        """Yield a session inside a transaction.

        Commits on success, rolls back on any exception (cancellation included).
        """
        async with self.session() as session:
            async with session.begin():
                yield session

    async def create_schema(self) -> None:
        """Create all tables and indexes (development and tests)."""
        # Register models on Base.metadata.
        from tasktracker.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_schema(self) -> None:
        from tasktracker.infrastructure.persistence import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
