"""DTOs for tasks, task history and archived tasks (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tasktrail.domain.enums import Priority, TaskStatus


@dataclass(frozen=True)
class TaskResult:
    """Active task read model."""

    id: str
    tenant_id: str
    owner_id: str
    title: str
    priority: Priority
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime
    version: int


@dataclass(frozen=True)
class TaskChanges:
    """New values computed by update_task; None means the field is unchanged."""

    title: str | None = None
    priority: Priority | None = None
    description: str | None = None
    status: TaskStatus | None = None

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.priority is None
            and self.description is None
            and self.status is None
        )


@dataclass(frozen=True)
class TaskHistoryResult:
    """One audit trail entry of an active task."""

    id: int
    task_id: str
    changed_by: str
    change_date: datetime
    change_description: str


@dataclass(frozen=True)
class DeletedTaskHistoryResult:
    """Audit trail entry preserved from a hard-deleted task."""

    id: str
    task_id: str
    tenant_id: str
    changed_by: str
    change_date: datetime
    change_description: str
    deleted_at: datetime


@dataclass(frozen=True)
class ArchivedTaskResult:
    """Frozen snapshot of a task taken by the archival job."""

    id: str
    task_id: str
    tenant_id: str
    owner_id: str
    title: str
    priority: Priority
    description: str | None
    status: TaskStatus
    created_at: datetime
    updated_at: datetime
    archived_at: datetime
