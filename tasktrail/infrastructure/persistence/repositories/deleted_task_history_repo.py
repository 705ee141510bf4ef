"""Deleted task history repository: immutable copy of a deleted task's audit trail."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.task import DeletedTaskHistoryResult, TaskHistoryResult
from tasktrail.infrastructure.persistence.models.deleted_task_history import (
    DeletedTaskHistory,
)
from tasktrail.shared.utils.datetime import ensure_utc


def _orm_to_result(row: DeletedTaskHistory) -> DeletedTaskHistoryResult:
    return DeletedTaskHistoryResult(
        id=row.id,
        task_id=row.task_id,
        tenant_id=row.tenant_id,
        changed_by=row.changed_by,
        change_date=ensure_utc(row.change_date),  # type: ignore[arg-type]
        change_description=row.change_description,
        deleted_at=ensure_utc(row.deleted_at),  # type: ignore[arg-type]
    )


class DeletedTaskHistoryRepository:
    """Insert-only repository for history preserved across hard deletes."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def preserve(
        self,
        tenant_id: str,
        entries: Sequence[TaskHistoryResult],
        deleted_at: datetime,
    ) -> int:
        """Copy entries (already ordered) into deleted_task_history; return count."""
        rows = [
            DeletedTaskHistory(
                tenant_id=tenant_id,
                task_id=e.task_id,
                changed_by=e.changed_by,
                change_date=e.change_date,
                change_description=e.change_description,
                sequence=position,
                deleted_at=deleted_at,
            )
            for position, e in enumerate(entries, start=1)
        ]
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def list_for_task(self, task_id: str) -> list[DeletedTaskHistoryResult]:
        """Return the preserved trail of a deleted task in original order."""
        stmt = (
            select(DeletedTaskHistory)
            .where(DeletedTaskHistory.task_id == task_id)
            .order_by(DeletedTaskHistory.sequence)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]
