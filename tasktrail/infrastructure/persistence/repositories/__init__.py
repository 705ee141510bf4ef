"""Persistence repositories. Re-exports for the unit of work."""

from tasktrail.infrastructure.persistence.repositories.archived_task_repo import (
    ArchivedTaskRepository,
)
from tasktrail.infrastructure.persistence.repositories.base import BaseRepository
from tasktrail.infrastructure.persistence.repositories.deleted_task_history_repo import (
    DeletedTaskHistoryRepository,
)
from tasktrail.infrastructure.persistence.repositories.permission_grant_repo import (
    PermissionGrantRepository,
)
from tasktrail.infrastructure.persistence.repositories.report_repo import ReportRepository
from tasktrail.infrastructure.persistence.repositories.task_history_repo import (
    TaskHistoryRepository,
)
from tasktrail.infrastructure.persistence.repositories.task_repo import TaskRepository
from tasktrail.infrastructure.persistence.repositories.tenant_repo import TenantRepository
from tasktrail.infrastructure.persistence.repositories.user_repo import UserRepository

__all__ = [
    "ArchivedTaskRepository",
    "BaseRepository",
    "DeletedTaskHistoryRepository",
    "PermissionGrantRepository",
    "ReportRepository",
    "TaskHistoryRepository",
    "TaskRepository",
    "TenantRepository",
    "UserRepository",
]
