"""Repository and unit-of-work interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tasktrail.application.dtos.permission import PermissionGrantResult
    from tasktrail.application.dtos.report import (
        ManagerStatisticsRow,
        TenantActivityReport,
    )
    from tasktrail.application.dtos.task import (
        ArchivedTaskResult,
        DeletedTaskHistoryResult,
        TaskChanges,
        TaskHistoryResult,
        TaskResult,
    )
    from tasktrail.application.dtos.tenant import TenantResult, UserResult
    from tasktrail.domain.enums import Priority, Role, TaskStatus


class ITenantRepository(Protocol):
    """Protocol for tenant repository (DIP)."""

    async def create_tenant(self, name: str) -> TenantResult:
        """Create a tenant."""

    async def get_by_id(self, tenant_id: str) -> TenantResult | None:
        """Return tenant by ID."""


class IUserRepository(Protocol):
    """Protocol for user repository (DIP)."""

    async def create_user(self, tenant_id: str, username: str, role: Role) -> UserResult:
        """Create a user in the tenant."""

    async def get_by_id(self, user_id: str) -> UserResult | None:
        """Return user by ID."""


class ITaskRepository(Protocol):
    """Protocol for active task repository (DIP)."""

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
        """Insert a task; the store rejects a duplicate dedup key."""

    async def get_by_id(
        self, task_id: str, *, for_update: bool = False
    ) -> TaskResult | None:
        """Return active task by ID, optionally locking the row."""

    async def exists_with_dedup_key(self, tenant_id: str, dedup_key: str) -> bool:
        """Return True if an active task of the tenant has this dedup key."""

    async def apply_changes(
        self,
        task_id: str,
        expected_version: int,
        changes: TaskChanges,
        *,
        dedup_key: str,
        updated_at: datetime,
    ) -> bool:
        """Write changes if the task is still at expected_version."""

    async def delete_by_ids(self, task_ids: Sequence[str]) -> int:
        """Delete tasks by id; return count."""

    async def list_stale_ids(self, cutoff: datetime) -> list[str]:
        """Return (and lock) ids of tasks with updated_at < cutoff."""

    async def delete_stale(self, task_ids: Sequence[str], cutoff: datetime) -> int:
        """Delete listed tasks still older than cutoff; return count."""

    async def list_by_tenant(self, tenant_id: str) -> list[TaskResult]:
        """Return all active tasks of the tenant."""

    async def list_owned_or_shared(
        self, tenant_id: str, user_id: str
    ) -> list[TaskResult]:
        """Return tasks owned by or shared with the user."""


class ITaskHistoryRepository(Protocol):
    """Protocol for append-only task history (DIP)."""

    async def append(
        self,
        task_id: str,
        changed_by: str,
        change_date: datetime,
        change_description: str,
    ) -> TaskHistoryResult:
        """Append one entry."""

    async def last_change_date(self, task_id: str) -> datetime | None:
        """Return latest change_date of the task, or None."""

    async def list_for_task(self, task_id: str) -> list[TaskHistoryResult]:
        """Return entries ordered by (change_date, insertion order)."""

    async def delete_for_tasks(self, task_ids: Sequence[str]) -> int:
        """Delete all entries of the given tasks."""


class IDeletedTaskHistoryRepository(Protocol):
    """Protocol for history preserved across hard deletes (DIP)."""

    async def preserve(
        self,
        tenant_id: str,
        entries: Sequence[TaskHistoryResult],
        deleted_at: datetime,
    ) -> int:
        """Copy entries into the deletion log."""

    async def list_for_task(self, task_id: str) -> list[DeletedTaskHistoryResult]:
        """Return the preserved trail of a deleted task."""


class IPermissionGrantRepository(Protocol):
    """Protocol for permission grants (DIP)."""

    async def has_grant(self, task_id: str, shared_with: str) -> bool:
        """Return True if the task is shared with the user."""

    async def create_if_absent(
        self,
        tenant_id: str,
        task_id: str,
        shared_with: str,
        granted_by: str | None = None,
    ) -> PermissionGrantResult | None:
        """Insert grant; None if it already existed."""

    async def list_for_task(self, task_id: str) -> list[PermissionGrantResult]:
        """Return grants of the task."""

    async def delete_for_tasks(self, task_ids: Sequence[str]) -> int:
        """Delete all grants of the given tasks."""


class IArchivedTaskRepository(Protocol):
    """Protocol for archived task snapshots (DIP)."""

    async def snapshot_tasks(
        self, task_ids: Sequence[str], archived_at: datetime
    ) -> int:
        """Copy active tasks into archived_task; return rows written."""

    async def get_by_task_id(self, task_id: str) -> ArchivedTaskResult | None:
        """Return snapshot by original task id."""


class IReportRepository(Protocol):
    """Protocol for report aggregates (DIP)."""

    async def manager_statistics(self, tenant_id: str) -> list[ManagerStatisticsRow]:
        """Task counts per owner, status and creation month."""

    async def tenant_activity(self, tenant_id: str) -> TenantActivityReport:
        """Aggregate counts for the tenant."""


class IUnitOfWork(Protocol):
    """Repositories bound to one transaction."""

    tenants: ITenantRepository
    users: IUserRepository
    tasks: ITaskRepository
    history: ITaskHistoryRepository
    deleted_history: IDeletedTaskHistoryRepository
    grants: IPermissionGrantRepository
    archived_tasks: IArchivedTaskRepository
    reports: IReportRepository


class IUnitOfWorkFactory(Protocol):
    """Opens a unit of work: all-or-nothing writes or a snapshot read."""

    def __call__(
        self, *, read_only: bool = False
    ) -> AbstractAsyncContextManager[IUnitOfWork]:
        """Return an async context manager yielding the unit of work."""
