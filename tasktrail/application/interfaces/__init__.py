"""Application interfaces (ports) implemented by infrastructure."""

from tasktrail.application.interfaces.repositories import (
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

__all__ = [
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
]
