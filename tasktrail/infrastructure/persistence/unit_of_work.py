"""SQLAlchemy unit of work: one transaction, all repositories bound to its session.

Write units commit on success and roll back on any exception. Read units
take a snapshot (REPEATABLE READ on PostgreSQL, a deferred transaction in WAL
mode on SQLite) and never block writers. Every unit is bounded by
transaction_timeout_seconds.

Driver errors are translated here so callers only see domain exceptions:
serialization failures, deadlocks and lock timeouts become
ConcurrentModificationConflict; other operational errors become
StoreUnavailableException. IntegrityError is left to the services, which know
which constraint a given operation can violate.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tasktrail.core.config import Settings
from tasktrail.domain.exceptions import (
    ConcurrentModificationConflict,
    StoreUnavailableException,
    TransactionTimeoutException,
)
from tasktrail.infrastructure.persistence.database import WRITE_UNIT_OPTION
from tasktrail.infrastructure.persistence.repositories import (
    ArchivedTaskRepository,
    DeletedTaskHistoryRepository,
    PermissionGrantRepository,
    ReportRepository,
    TaskHistoryRepository,
    TaskRepository,
    TenantRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available
_PG_CONFLICT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
_SQLITE_CONFLICT_MARKERS = ("database is locked", "database table is locked")


class SqlAlchemyUnitOfWork:
    """Repositories sharing one AsyncSession (one transaction)."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.tenants = TenantRepository(session)
        self.users = UserRepository(session)
        self.tasks = TaskRepository(session)
        self.history = TaskHistoryRepository(session)
        self.deleted_history = DeletedTaskHistoryRepository(session)
        self.grants = PermissionGrantRepository(session)
        self.archived_tasks = ArchivedTaskRepository(session)
        self.reports = ReportRepository(session)


def _is_conflict(exc: DBAPIError) -> bool:
    """Return True if the driver error means a concurrent transaction won."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _PG_CONFLICT_SQLSTATES:
        return True
    message = str(orig).lower()
    return any(marker in message for marker in _SQLITE_CONFLICT_MARKERS)


class SqlAlchemyUnitOfWorkFactory:
    """Opens units of work. Implements IUnitOfWorkFactory."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings,
    ) -> None:
        self._session_factory = session_factory
        self._timeout_seconds = settings.transaction_timeout_seconds
        self._is_sqlite = settings.is_sqlite
        self._read_isolation_level = settings.db_read_isolation_level.upper()

    def _execution_options(self, read_only: bool) -> dict[str, Any]:
        if self._is_sqlite:
            return {} if read_only else {WRITE_UNIT_OPTION: True}
        return {"isolation_level": self._read_isolation_level} if read_only else {}

    @asynccontextmanager
    async def __call__(
        self, *, read_only: bool = False
    ) -> AsyncIterator[SqlAlchemyUnitOfWork]:
        """Yield a unit of work; commit on normal exit, roll back on error."""
        try:
            async with asyncio.timeout(self._timeout_seconds):
                async with self._session_factory() as session:
                    async with session.begin():
                        await session.connection(
                            execution_options=self._execution_options(read_only)
                        )
                        yield SqlAlchemyUnitOfWork(session)
        except TimeoutError as exc:
            logger.warning(
                "Unit of work exceeded %s seconds and was rolled back",
                self._timeout_seconds,
            )
            raise TransactionTimeoutException(self._timeout_seconds) from exc
        except IntegrityError:
            raise
        except DBAPIError as exc:
            if _is_conflict(exc):
                logger.warning("Transaction conflict: %s", exc.orig)
                raise ConcurrentModificationConflict("transaction") from exc
            logger.error("Entity store error: %s", exc.orig)
            raise StoreUnavailableException(str(exc.orig)) from exc
