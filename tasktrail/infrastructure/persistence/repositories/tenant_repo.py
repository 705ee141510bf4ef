"""Tenant repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.tenant import TenantResult
from tasktrail.infrastructure.persistence.models.tenant import Tenant
from tasktrail.infrastructure.persistence.repositories.base import BaseRepository


def _tenant_to_result(t: Tenant) -> TenantResult:
    return TenantResult(id=t.id, name=t.name)


class TenantRepository(BaseRepository[Tenant]):
    """Tenant repository. Implements ITenantRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Tenant)

    async def create_tenant(self, name: str) -> TenantResult:
        """Create a tenant and return the result DTO."""
        created = await self._create(Tenant(name=name))
        return _tenant_to_result(created)

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        tenant = await self._get_orm_by_id(tenant_id)
        return _tenant_to_result(tenant) if tenant else None
