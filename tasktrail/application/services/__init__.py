"""Application services shared by the use cases."""

from tasktrail.application.services.audit_recorder import AuditRecorder
from tasktrail.application.services.directory_service import DirectoryService

__all__ = ["AuditRecorder", "DirectoryService"]
