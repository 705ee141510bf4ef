"""Permission grant repository: per-task sharing with users of the same tenant."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.permission import PermissionGrantResult
from tasktrail.infrastructure.persistence.models.permission_grant import PermissionGrant
from tasktrail.shared.utils.datetime import ensure_utc


def _grant_to_result(g: PermissionGrant) -> PermissionGrantResult:
    return PermissionGrantResult(
        id=g.id,
        task_id=g.task_id,
        shared_with=g.shared_with,
        granted_by=g.granted_by,
        created_at=ensure_utc(g.created_at),  # type: ignore[arg-type]
    )


class PermissionGrantRepository:
    """Permission grant repository. Implements IPermissionGrantRepository."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def has_grant(self, task_id: str, shared_with: str) -> bool:
        """Return True if the task is already shared with the user."""
        stmt = select(
            exists().where(
                PermissionGrant.task_id == task_id,
                PermissionGrant.shared_with == shared_with,
            )
        )
        return bool((await self.db.execute(stmt)).scalar())

    async def create_if_absent(
        self,
        tenant_id: str,
        task_id: str,
        shared_with: str,
        granted_by: str | None = None,
    ) -> PermissionGrantResult | None:
        """Insert the grant; return None if (task_id, shared_with) already exists.

        Runs in a savepoint so a concurrent insert of the same pair only rolls
        back the savepoint, not the caller's unit of work. Any other integrity
        failure (the task or user row is gone) is re-raised.
        """
        grant = PermissionGrant(
            tenant_id=tenant_id,
            task_id=task_id,
            shared_with=shared_with,
            granted_by=granted_by,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(grant)
                await self.db.flush()
        except IntegrityError:
            if await self.has_grant(task_id, shared_with):
                return None
            raise
        await self.db.refresh(grant)
        return _grant_to_result(grant)

    async def list_for_task(self, task_id: str) -> list[PermissionGrantResult]:
        result = await self.db.execute(
            select(PermissionGrant)
            .where(PermissionGrant.task_id == task_id)
            .order_by(PermissionGrant.created_at, PermissionGrant.id)
        )
        return [_grant_to_result(g) for g in result.scalars().all()]

    async def delete_for_tasks(self, task_ids: Sequence[str]) -> int:
        """Delete all grants of the given tasks; return rows deleted."""
        if not task_ids:
            return 0
        stmt = (
            delete(PermissionGrant)
            .where(PermissionGrant.task_id.in_(task_ids))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount
