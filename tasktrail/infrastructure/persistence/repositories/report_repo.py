"""Report repository: read-only aggregates over active tasks.

Each report is a single SELECT so it is consistent even without a snapshot
transaction; the unit of work adds one for multi-statement readers.
"""

from __future__ import annotations

from sqlalchemy import case, distinct, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.report import ManagerStatisticsRow, TenantActivityReport
from tasktrail.domain.enums import TaskStatus
from tasktrail.infrastructure.persistence.models.task import Task
from tasktrail.infrastructure.persistence.models.user import User


class ReportRepository:
    """Aggregation queries for ReportEngine."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def manager_statistics(self, tenant_id: str) -> list[ManagerStatisticsRow]:
        """Count active tasks per (owner username, status, creation year/month).

        Ordered by year and month, then by descending count; username and
        status break remaining ties.
        """
        year = extract("year", Task.created_at)
        month = extract("month", Task.created_at)
        task_count = func.count(Task.id)
        stmt = (
            select(
                User.username,
                Task.status,
                year.label("year"),
                month.label("month"),
                task_count.label("task_count"),
            )
            .join(User, User.id == Task.owner_id)
            .where(Task.tenant_id == tenant_id)
            .group_by(User.username, Task.status, year, month)
            .order_by(year, month, task_count.desc(), User.username, Task.status)
        )
        result = await self.db.execute(stmt)
        return [
            ManagerStatisticsRow(
                employee=row.username,
                status=TaskStatus(row.status),
                year=int(row.year),
                month=int(row.month),
                task_count=int(row.task_count),
            )
            for row in result.all()
        ]

    async def tenant_activity(self, tenant_id: str) -> TenantActivityReport:
        """Return owner/task/completed/pending counts for the tenant's active tasks."""

        def _count_status(status: TaskStatus):
            return func.coalesce(
                func.sum(case((Task.status == status.value, 1), else_=0)), 0
            )

        stmt = select(
            func.count(distinct(Task.owner_id)).label("total_users"),
            func.count(Task.id).label("total_tasks"),
            _count_status(TaskStatus.COMPLETED).label("completed_tasks"),
            _count_status(TaskStatus.PENDING).label("pending_tasks"),
        ).where(Task.tenant_id == tenant_id)
        row = (await self.db.execute(stmt)).one()
        return TenantActivityReport(
            tenant_id=tenant_id,
            total_users=int(row.total_users),
            total_tasks=int(row.total_tasks),
            completed_tasks=int(row.completed_tasks),
            pending_tasks=int(row.pending_tasks),
        )
