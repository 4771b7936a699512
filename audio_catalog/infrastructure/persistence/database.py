"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (see migrations/versions).

Engine and session factory are created lazily on first use (get_db /
get_db_transactional / get_session_factory) so import does not trigger
Settings validation.
"""

import logging
from collections.abc import AsyncIterator, Callable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from audio_catalog.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# session.info key holding callbacks that run once the request transaction commits.
_AFTER_COMMIT = "after_commit_callbacks"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: Any = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


def _engine_options(settings: Settings) -> dict[str, Any]:
    """Pool and asyncpg options; only PostgreSQL URLs get a pool and command timeout."""
    options: dict[str, Any] = {"echo": settings.database_echo}
    if "postgresql" not in settings.database_url:
        return options
    options.update(
        connect_args={"command_timeout": settings.db_command_timeout or 60},
        pool_pre_ping=True,
        pool_size=settings.db_pool_size or 10,
        max_overflow=settings.db_max_overflow if settings.db_max_overflow is not None else 20,
        pool_recycle=3600,
    )
    return options


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    engine = create_async_engine(settings.database_url, **_engine_options(settings))
    AsyncSessionLocal = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )
    logger.info("Database engine created")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the session factory, creating the engine if needed (used outside requests)."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency for read operations.

    Does not commit; use get_db_transactional for writes.
    Yields a session and closes it on exit.
    """
    async with get_session_factory()() as session:
        yield session


async def get_db_transactional() -> AsyncIterator[AsyncSession]:
    """Database session dependency for write operations.

    Begins a transaction, commits on success, rolls back on exception.
    Callbacks registered with run_after_commit run only after the commit;
    on rollback they are dropped. Use for POST, PUT, PATCH, DELETE endpoints.
    """
    async with get_session_factory()() as session:
        session.info[_AFTER_COMMIT] = []
        async with session.begin():
            yield session
        for callback in session.info.pop(_AFTER_COMMIT):
            callback()


def run_after_commit(session: AsyncSession, callback: Callable[[], None]) -> None:
    """Defer callback until the request transaction commits.

    Sessions not opened by get_db_transactional have no pending commit, so
    the callback runs immediately.
    """
    pending = session.info.get(_AFTER_COMMIT)
    if pending is None:
        callback()
    else:
        pending.append(callback)


async def dispose_engine() -> None:
    """Dispose the engine if it was created (call on shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        engine = None
        AsyncSessionLocal = None
        logger.info("Database engine disposed")
