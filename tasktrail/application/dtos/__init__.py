"""Application DTOs (read models and write models); no ORM imports."""

from tasktrail.application.dtos.archival import ArchivalRunResult
from tasktrail.application.dtos.permission import PermissionGrantResult
from tasktrail.application.dtos.report import ManagerStatisticsRow, TenantActivityReport
from tasktrail.application.dtos.task import (
    ArchivedTaskResult,
    DeletedTaskHistoryResult,
    TaskChanges,
    TaskHistoryResult,
    TaskResult,
)
from tasktrail.application.dtos.tenant import TenantResult, UserResult

__all__ = [
    "ArchivalRunResult",
    "ArchivedTaskResult",
    "DeletedTaskHistoryResult",
    "ManagerStatisticsRow",
    "PermissionGrantResult",
    "TaskChanges",
    "TaskHistoryResult",
    "TaskResult",
    "TenantActivityReport",
    "TenantResult",
    "UserResult",
]
