"""Task history ORM model. Append-only audit trail of task mutations."""

from datetime import datetime
from typing import Any

from sqlalchemy import (
    BigInteger,
    Connection,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    event,
)
from sqlalchemy.orm import Mapped, Mapper, mapped_column

from tasktrail.infrastructure.persistence.database import Base


class TaskHistory(Base):
    """One history entry. Table: task_history.

    id is an autoincrement integer so entries with equal change_date keep
    insertion order. Rows are removed only together with their task (bulk
    delete on task deletion or archival).
    """

    __tablename__ = "task_history"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    task_id: Mapped[str] = mapped_column(
        String, ForeignKey("task.id"), nullable=False
    )
    changed_by: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id"), nullable=False
    )
    change_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    change_description: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_task_history_task_order", "task_id", "change_date", "id"),
    )


@event.listens_for(TaskHistory, "before_update")
def _prevent_task_history_updates(
    _mapper: Mapper[Any], _connection: Connection, _target: TaskHistory
) -> None:
    """History entries are append-only; updates are forbidden."""
    raise ValueError("Task history entries are immutable and cannot be updated.")
