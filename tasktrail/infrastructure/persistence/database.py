"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

Schema is managed by Alembic migrations (tests create it from Base.metadata).
Engine and session factory are created lazily on first use
(get_session_factory) so import does not trigger Settings validation.

SQLite: the driver's implicit BEGIN is disabled and the "begin" hook emits
BEGIN IMMEDIATE for write units and BEGIN DEFERRED for read units. Writers
therefore serialize on the database lock instead of failing on lock upgrade,
and readers in WAL mode see a snapshot without blocking writers.
"""

import logging
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from tasktrail.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Connection execution option marking a write unit of work (see _on_begin).
WRITE_UNIT_OPTION = "tasktrail_write_unit"

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def _install_sqlite_hooks(async_engine: AsyncEngine) -> None:
    """Enable foreign keys and WAL, and take over BEGIN on every SQLite connection."""
    sync_engine = async_engine.sync_engine

    @event.listens_for(sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(sync_engine, "begin")
    def _on_begin(conn: Connection) -> None:
        if conn.get_execution_options().get(WRITE_UNIT_OPTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN DEFERRED")


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for settings.database_url with pool/driver overrides."""
    engine_kwargs: dict[str, Any] = {
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }
    connect_args: dict[str, Any] = {}
    command_timeout = (
        settings.db_command_timeout if settings.db_command_timeout is not None else 60
    )
    if settings.is_sqlite:
        # Busy timeout: how long a writer waits for the database lock.
        connect_args["timeout"] = command_timeout
    else:
        connect_args["command_timeout"] = command_timeout
        engine_kwargs["pool_size"] = (
            settings.db_pool_size if settings.db_pool_size is not None else 20
        )
        engine_kwargs["max_overflow"] = (
            settings.db_max_overflow if settings.db_max_overflow is not None else 30
        )
        engine_kwargs["pool_recycle"] = 3600
    async_engine = create_async_engine(
        settings.database_url, connect_args=connect_args, **engine_kwargs
    )
    if settings.is_sqlite:
        _install_sqlite_hooks(async_engine)
    return async_engine


def create_session_factory(
    async_engine: AsyncEngine,
) -> async_sessionmaker[AsyncSession]:
    """Return a session factory bound to async_engine (no autoflush, no expiry on commit)."""
    return async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    engine = create_engine(settings)
    AsyncSessionLocal = create_session_factory(engine)
    logger.debug("Created database engine for %s", engine.url.render_as_string())


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Return the process-wide session factory, creating the engine if needed."""
    _ensure_engine()
    assert AsyncSessionLocal is not None
    return AsyncSessionLocal


async def dispose_engine() -> None:
    """Dispose the process-wide engine (end of script / shutdown)."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
    engine = None
    AsyncSessionLocal = None
