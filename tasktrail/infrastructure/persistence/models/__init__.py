"""Persistence models: ORM entities and mixins."""

from tasktrail.infrastructure.persistence.models.archived_task import ArchivedTask
from tasktrail.infrastructure.persistence.models.deleted_task_history import (
    DeletedTaskHistory,
)
from tasktrail.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    TenantMixin,
    TimestampMixin,
    VersionedMixin,
)
from tasktrail.infrastructure.persistence.models.permission_grant import PermissionGrant
from tasktrail.infrastructure.persistence.models.task import Task
from tasktrail.infrastructure.persistence.models.task_history import TaskHistory
from tasktrail.infrastructure.persistence.models.tenant import Tenant
from tasktrail.infrastructure.persistence.models.user import User

__all__ = [
    "ArchivedTask",
    "DeletedTaskHistory",
    "PermissionGrant",
    "Task",
    "TaskHistory",
    "Tenant",
    "User",
    "CuidMixin",
    "TenantMixin",
    "TimestampMixin",
    "VersionedMixin",
    "MultiTenantModel",
]
