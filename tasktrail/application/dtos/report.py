"""DTOs for manager statistics and tenant activity reports."""

from __future__ import annotations

from dataclasses import dataclass

from tasktrail.domain.enums import TaskStatus


@dataclass(frozen=True)
class ManagerStatisticsRow:
    """Count of active tasks for one (employee, status, creation month) group."""

    employee: str
    status: TaskStatus
    year: int
    month: int
    task_count: int


@dataclass(frozen=True)
class TenantActivityReport:
    """Aggregate counts over the active tasks of a tenant.

    total_users counts the distinct owners of active tasks, not every user
    registered in the tenant.
    """

    tenant_id: str
    total_users: int
    total_tasks: int
    completed_tasks: int
    pending_tasks: int
