"""Pytest configuration and fixtures for tasktrail.

Every test that touches the store gets its own SQLite file under tmp_path
(aiosqlite, WAL mode), with the schema created from Base.metadata. All
services share one unit-of-work factory, as in production wiring.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import tasktrail.infrastructure.persistence.models  # noqa: F401  (registers tables)
from tasktrail.application.dtos.tenant import TenantResult, UserResult
from tasktrail.core.config import Settings
from tasktrail.core.lifespan import Services, build_services
from tasktrail.infrastructure.persistence.database import (
    Base,
    create_engine,
    create_session_factory,
)
from tasktrail.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWorkFactory


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings for a throwaway SQLite database (ignores any local .env)."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'tasktrail-test.db'}",
        db_command_timeout=30,
        transaction_timeout_seconds=20.0,
    )


@pytest.fixture
async def engine(settings: Settings) -> AsyncIterator[AsyncEngine]:
    """Async engine with the schema created; disposed after the test."""
    async_engine = create_engine(settings)
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_engine
    await async_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
def uow_factory(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> SqlAlchemyUnitOfWorkFactory:
    """Unit-of-work factory for tests that inspect rows directly."""
    return SqlAlchemyUnitOfWorkFactory(session_factory, settings)


@pytest.fixture
def services(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> Services:
    return build_services(session_factory, settings)


@dataclass(frozen=True)
class Directory:
    """Two tenants: acme (manager, alice, bob) and globex (gina)."""

    acme: TenantResult
    globex: TenantResult
    manager: UserResult
    alice: UserResult
    bob: UserResult
    gina: UserResult


@pytest.fixture
async def directory(services: Services) -> Directory:
    """Seed two tenants and their users."""
    acme = await services.directory.create_tenant("Acme")
    globex = await services.directory.create_tenant("Globex")
    return Directory(
        acme=acme,
        globex=globex,
        manager=await services.directory.create_user(acme.id, "mona", "Manager"),
        alice=await services.directory.create_user(acme.id, "alice", "Employee"),
        bob=await services.directory.create_user(acme.id, "bob", "Employee"),
        gina=await services.directory.create_user(globex.id, "gina", "Employee"),
    )
