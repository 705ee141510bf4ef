"""Process lifespan: wire services to the database and dispose the engine on exit.

Single place for startup/shutdown wiring; no business logic here. Scripts
and embedding applications enter create_lifespan() once per process.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tasktrail.application.services import DirectoryService
from tasktrail.application.use_cases import (
    ArchivalJob,
    ReportEngine,
    TaskService,
    VisibilityResolver,
)
from tasktrail.core.config import Settings, get_settings
from tasktrail.infrastructure.persistence import database
from tasktrail.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWorkFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """Entry points of the system, all sharing one unit-of-work factory."""

    directory: DirectoryService
    tasks: TaskService
    visibility: VisibilityResolver
    archival: ArchivalJob
    reports: ReportEngine


def build_services(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    settings: Settings | None = None,
) -> Services:
    """Build services over session_factory (default: the process-wide one)."""
    settings = settings or get_settings()
    session_factory = session_factory or database.get_session_factory()
    uow_factory = SqlAlchemyUnitOfWorkFactory(session_factory, settings)
    return Services(
        directory=DirectoryService(uow_factory),
        tasks=TaskService(uow_factory),
        visibility=VisibilityResolver(uow_factory),
        archival=ArchivalJob(uow_factory),
        reports=ReportEngine(uow_factory),
    )


@asynccontextmanager
async def create_lifespan() -> AsyncIterator[Services]:
    """Yield wired services; dispose the SQL engine on exit."""
    services = build_services()
    logger.info("tasktrail services ready")
    try:
        yield services
    finally:
        await database.dispose_engine()
        logger.info("Database engine disposed")
