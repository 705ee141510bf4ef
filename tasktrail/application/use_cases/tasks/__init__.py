"""Task use cases: mutations with audit, visibility and archival."""

from tasktrail.application.use_cases.tasks.archive_tasks import ArchivalJob
from tasktrail.application.use_cases.tasks.task_operations import TaskService
from tasktrail.application.use_cases.tasks.visibility import VisibilityResolver

__all__ = [
    "ArchivalJob",
    "TaskService",
    "VisibilityResolver",
]
