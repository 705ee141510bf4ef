"""Archived task ORM model. Frozen snapshot of a task; immutable once written."""

from datetime import datetime
from typing import Any

from sqlalchemy import Connection, DateTime, ForeignKey, String, Text, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin


class ArchivedTask(CuidMixin, TenantMixin, Base):
    """Snapshot written by the archival job. Table: archived_task.

    Own id space; task_id keeps the original task id. Field values (including
    created_at/updated_at) are copied verbatim from the active row.
    """

    __tablename__ = "archived_task"

    task_id: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    owner_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    archived_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


@event.listens_for(ArchivedTask, "before_update")
def _prevent_archived_task_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: ArchivedTask
) -> None:
    """Archived snapshots are frozen; updates are forbidden."""
    raise ValueError("Archived tasks are immutable and cannot be updated.")


@event.listens_for(ArchivedTask, "before_delete")
def _prevent_archived_task_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: ArchivedTask
) -> None:
    """Archived snapshots cannot be deleted."""
    raise ValueError("Archived tasks cannot be deleted.")
