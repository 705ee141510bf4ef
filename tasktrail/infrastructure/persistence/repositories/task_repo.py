"""Task repository: active task rows, optimistic-lock updates and visibility queries."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import delete, exists, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.task import TaskChanges, TaskResult
from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.infrastructure.persistence.models.permission_grant import PermissionGrant
from tasktrail.infrastructure.persistence.models.task import Task
from tasktrail.infrastructure.persistence.repositories.base import BaseRepository
from tasktrail.shared.utils.datetime import ensure_utc


def _to_result(t: Task) -> TaskResult:
    """Map Task ORM to TaskResult DTO."""
    return TaskResult(
        id=t.id,
        tenant_id=t.tenant_id,
        owner_id=t.owner_id,
        title=t.title,
        priority=Priority(t.priority),
        description=t.description,
        status=TaskStatus(t.status),
        created_at=ensure_utc(t.created_at),  # type: ignore[arg-type]
        updated_at=ensure_utc(t.updated_at),  # type: ignore[arg-type]
        version=t.version,
    )


class TaskRepository(BaseRepository[Task]):
    """Task repository. Implements ITaskRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Task)

    async def create(
        self,
        tenant_id: str,
        owner_id: str,
        title: str,
        priority: Priority,
        description: str | None,
        status: TaskStatus,
        *,
        dedup_key: str,
        now: datetime,
    ) -> TaskResult:
        """Insert a task with created_at = updated_at = now.

        IntegrityError (duplicate dedup_key, owner outside tenant) propagates.
        """
        task = Task(
            tenant_id=tenant_id,
            owner_id=owner_id,
            title=title,
            priority=priority.value,
            description=description,
            status=status.value,
            dedup_key=dedup_key,
            created_at=now,
            updated_at=now,
            version=1,
        )
        created = await self._create(task)
        return _to_result(created)

    async def get_by_id(
        self, task_id: str, *, for_update: bool = False
    ) -> TaskResult | None:
        task = await self._get_orm_by_id(task_id, for_update=for_update)
        return _to_result(task) if task else None

    async def exists_with_dedup_key(self, tenant_id: str, dedup_key: str) -> bool:
        """Return True if an active task of the tenant has this dedup key."""
        stmt = select(
            exists().where(Task.tenant_id == tenant_id, Task.dedup_key == dedup_key)
        )
        return bool((await self.db.execute(stmt)).scalar())

    async def apply_changes(
        self,
        task_id: str,
        expected_version: int,
        changes: TaskChanges,
        *,
        dedup_key: str,
        updated_at: datetime,
    ) -> bool:
        """Write changed fields only if the row is still at expected_version (optimistic lock).

        Increments version and sets updated_at. Returns True if exactly one row
        was updated; False if another transaction changed or removed the task.
        """
        values: dict[str, object] = {
            "version": expected_version + 1,
            "updated_at": updated_at,
            "dedup_key": dedup_key,
        }
        if changes.title is not None:
            values["title"] = changes.title
        if changes.priority is not None:
            values["priority"] = changes.priority.value
        if changes.description is not None:
            values["description"] = changes.description
        if changes.status is not None:
            values["status"] = changes.status.value
        stmt = (
            update(Task)
            .where(Task.id == task_id, Task.version == expected_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def delete_by_ids(self, task_ids: Sequence[str]) -> int:
        """Delete tasks by id; children must already be gone. Returns rows deleted."""
        if not task_ids:
            return 0
        stmt = (
            delete(Task)
            .where(Task.id.in_(task_ids))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def list_stale_ids(self, cutoff: datetime) -> list[str]:
        """Return ids of active tasks with updated_at < cutoff, locking their rows."""
        stmt = (
            select(Task.id)
            .where(Task.updated_at < cutoff)
            .order_by(Task.id)
            .with_for_update()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def delete_stale(self, task_ids: Sequence[str], cutoff: datetime) -> int:
        """Delete the given tasks that still satisfy updated_at < cutoff; return count."""
        if not task_ids:
            return 0
        stmt = (
            delete(Task)
            .where(Task.id.in_(task_ids), Task.updated_at < cutoff)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def list_by_tenant(self, tenant_id: str) -> list[TaskResult]:
        """Return every active task of the tenant (oldest first)."""
        stmt = (
            select(Task)
            .where(Task.tenant_id == tenant_id)
            .order_by(Task.created_at, Task.id)
        )
        result = await self.db.execute(stmt)
        return [_to_result(t) for t in result.scalars().all()]

    async def list_owned_or_shared(
        self, tenant_id: str, user_id: str
    ) -> list[TaskResult]:
        """Return tasks the user owns plus tasks granted to the user, each once."""
        shared_task_ids = select(PermissionGrant.task_id).where(
            PermissionGrant.shared_with == user_id
        )
        stmt = (
            select(Task)
            .where(
                Task.tenant_id == tenant_id,
                or_(Task.owner_id == user_id, Task.id.in_(shared_task_ids)),
            )
            .order_by(Task.created_at, Task.id)
        )
        result = await self.db.execute(stmt)
        return [_to_result(t) for t in result.scalars().all()]
