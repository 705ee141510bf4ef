"""Report use cases: read-only aggregates over active tasks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tasktrail.application.dtos.report import (
        ManagerStatisticsRow,
        TenantActivityReport,
    )
    from tasktrail.application.interfaces.repositories import IUnitOfWorkFactory

logger = logging.getLogger(__name__)


class ReportEngine:
    """Tenant-scoped statistics, each computed by one statement in a snapshot."""

    def __init__(self, uow_factory: "IUnitOfWorkFactory") -> None:
        self._uow_factory = uow_factory

    async def get_manager_statistics(
        self, tenant_id: str
    ) -> list["ManagerStatisticsRow"]:
        """Task counts per (employee, status, creation month), by month then count desc."""
        async with self._uow_factory(read_only=True) as uow:
            rows = await uow.reports.manager_statistics(tenant_id)
        logger.debug("Manager statistics for tenant %s: %d row(s)", tenant_id, len(rows))
        return rows

    async def get_tenant_activity_report(self, tenant_id: str) -> "TenantActivityReport":
        """Totals for the tenant; all zeros when it has no active tasks."""
        async with self._uow_factory(read_only=True) as uow:
            return await uow.reports.tenant_activity(tenant_id)
