"""Task history repository. Append-only; rows leave only with their task."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.task import TaskHistoryResult
from tasktrail.infrastructure.persistence.models.task_history import TaskHistory
from tasktrail.shared.utils.datetime import ensure_utc


def _orm_to_result(row: TaskHistory) -> TaskHistoryResult:
    """Map ORM to application DTO."""
    return TaskHistoryResult(
        id=row.id,
        task_id=row.task_id,
        changed_by=row.changed_by,
        change_date=ensure_utc(row.change_date),  # type: ignore[arg-type]
        change_description=row.change_description,
    )


class TaskHistoryRepository:
    """Append-only task history repository. No update."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def append(
        self,
        task_id: str,
        changed_by: str,
        change_date: datetime,
        change_description: str,
    ) -> TaskHistoryResult:
        """Append one entry; return created record."""
        row = TaskHistory(
            task_id=task_id,
            changed_by=changed_by,
            change_date=change_date,
            change_description=change_description,
        )
        self.db.add(row)
        await self.db.flush()
        await self.db.refresh(row)
        return _orm_to_result(row)

    async def last_change_date(self, task_id: str) -> datetime | None:
        """Return the latest change_date recorded for the task, or None."""
        result = await self.db.execute(
            select(func.max(TaskHistory.change_date)).where(
                TaskHistory.task_id == task_id
            )
        )
        return ensure_utc(result.scalar_one_or_none())

    async def list_for_task(self, task_id: str) -> list[TaskHistoryResult]:
        """Return the task's entries ordered by change_date, then insertion order."""
        stmt = (
            select(TaskHistory)
            .where(TaskHistory.task_id == task_id)
            .order_by(TaskHistory.change_date, TaskHistory.id)
        )
        result = await self.db.execute(stmt)
        return [_orm_to_result(r) for r in result.scalars().all()]

    async def delete_for_tasks(self, task_ids: Sequence[str]) -> int:
        """Delete all entries of the given tasks (task deletion/archival cascade)."""
        if not task_ids:
            return 0
        stmt = (
            delete(TaskHistory)
            .where(TaskHistory.task_id.in_(task_ids))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount
