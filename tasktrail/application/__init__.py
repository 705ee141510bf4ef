"""Application layer: interfaces, services, use cases.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repositories, unit of work).
"""

from tasktrail.application.interfaces import (
    IArchivedTaskRepository,
    IDeletedTaskHistoryRepository,
    IPermissionGrantRepository,
    IReportRepository,
    ITaskHistoryRepository,
    ITaskRepository,
    ITenantRepository,
    IUnitOfWork,
    IUnitOfWorkFactory,
    IUserRepository,
)
from tasktrail.application.services import AuditRecorder, DirectoryService
from tasktrail.application.use_cases import (
    ArchivalJob,
    ReportEngine,
    TaskService,
    VisibilityResolver,
)

__all__ = [
    "ArchivalJob",
    "AuditRecorder",
    "DirectoryService",
    "IArchivedTaskRepository",
    "IDeletedTaskHistoryRepository",
    "IPermissionGrantRepository",
    "IReportRepository",
    "ITaskHistoryRepository",
    "ITaskRepository",
    "ITenantRepository",
    "IUnitOfWork",
    "IUnitOfWorkFactory",
    "IUserRepository",
    "ReportEngine",
    "TaskService",
    "VisibilityResolver",
]
