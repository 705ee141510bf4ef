"""Archived task repository: frozen snapshots written by the archival job."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.task import ArchivedTaskResult
from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.infrastructure.persistence.models.archived_task import ArchivedTask
from tasktrail.infrastructure.persistence.models.task import Task
from tasktrail.shared.utils.datetime import ensure_utc


def _orm_to_result(a: ArchivedTask) -> ArchivedTaskResult:
    return ArchivedTaskResult(
        id=a.id,
        task_id=a.task_id,
        tenant_id=a.tenant_id,
        owner_id=a.owner_id,
        title=a.title,
        priority=Priority(a.priority),
        description=a.description,
        status=TaskStatus(a.status),
        created_at=ensure_utc(a.created_at),  # type: ignore[arg-type]
        updated_at=ensure_utc(a.updated_at),  # type: ignore[arg-type]
        archived_at=ensure_utc(a.archived_at),  # type: ignore[arg-type]
    )


class ArchivedTaskRepository:
    """Insert-only archived task repository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def snapshot_tasks(
        self, task_ids: Sequence[str], archived_at: datetime
    ) -> int:
        """Copy the current field values of the given active tasks; return rows written."""
        if not task_ids:
            return 0
        result = await self.db.execute(select(Task).where(Task.id.in_(task_ids)))
        rows = [
            ArchivedTask(
                task_id=t.id,
                tenant_id=t.tenant_id,
                owner_id=t.owner_id,
                title=t.title,
                priority=t.priority,
                description=t.description,
                status=t.status,
                created_at=t.created_at,
                updated_at=t.updated_at,
                archived_at=archived_at,
            )
            for t in result.scalars().all()
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def get_by_task_id(self, task_id: str) -> ArchivedTaskResult | None:
        """Return the snapshot of an archived task by its original id."""
        result = await self.db.execute(
            select(ArchivedTask).where(ArchivedTask.task_id == task_id)
        )
        row = result.scalar_one_or_none()
        return _orm_to_result(row) if row else None
