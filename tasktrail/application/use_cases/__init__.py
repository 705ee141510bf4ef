"""Application use cases: one entry point per workflow."""

from tasktrail.application.use_cases.reports import ReportEngine
from tasktrail.application.use_cases.tasks import (
    ArchivalJob,
    TaskService,
    VisibilityResolver,
)

__all__ = [
    "ArchivalJob",
    "ReportEngine",
    "TaskService",
    "VisibilityResolver",
]
