"""DTOs for archival runs."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ArchivalRunResult:
    """Result of one archival unit."""

    cutoff: datetime
    """Tasks with updated_at strictly before this instant were archived."""

    archived_task_ids: tuple[str, ...]
    """Original ids of the tasks moved to archived_task."""

    @property
    def archived_count(self) -> int:
        return len(self.archived_task_ids)
