"""DTOs for per-task permission grants."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PermissionGrantResult:
    """Grant of visibility on one task to one user."""

    id: str
    task_id: str
    shared_with: str
    granted_by: str | None
    created_at: datetime
