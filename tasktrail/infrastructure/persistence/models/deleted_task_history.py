"""Deleted task history ORM model. Audit trail preserved from hard-deleted tasks."""

from datetime import datetime
from typing import Any

from sqlalchemy import Connection, DateTime, ForeignKey, String, Text, event
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin


class DeletedTaskHistory(CuidMixin, TenantMixin, Base):
    """History entry copied out before a task is deleted. Table: deleted_task_history.

    task_id has no foreign key: the task row is gone once this is written.
    """

    __tablename__ = "deleted_task_history"

    task_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    changed_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False
    )
    change_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    change_description: Mapped[str] = mapped_column(Text, nullable=False)
    # Position of the entry in the original trail (history id order).
    sequence: Mapped[int] = mapped_column(nullable=False)
    deleted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


@event.listens_for(DeletedTaskHistory, "before_update")
def _prevent_deleted_history_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: DeletedTaskHistory
) -> None:
    """Preserved history is append-only; updates are forbidden."""
    raise ValueError("Deleted task history entries are immutable and cannot be updated.")


@event.listens_for(DeletedTaskHistory, "before_delete")
def _prevent_deleted_history_deletes(
    _mapper: Mapper[Any], _connection: Connection, _target: DeletedTaskHistory
) -> None:
    """Preserved history cannot be deleted."""
    raise ValueError("Deleted task history entries cannot be deleted.")
