"""Task ORM model. Active tasks only; archived tasks live in archived_task."""

from sqlalchemy import ForeignKeyConstraint, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models._constraints import enum_check
from tasktrail.infrastructure.persistence.models.mixins import (
    MultiTenantModel,
    VersionedMixin,
)


class Task(MultiTenantModel, VersionedMixin, Base):
    """Task owned by a user of the same tenant. Table: task.

    dedup_key is the SHA-256 of (tenant_id, owner_id, title, description); the
    unique (tenant_id, dedup_key) constraint rejects a concurrent duplicate at
    write time even when both creators passed the existence check.
    """

    __tablename__ = "task"

    owner_id: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    priority: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    dedup_key: Mapped[str] = mapped_column(String(64), nullable=False)

    __table_args__ = (
        ForeignKeyConstraint(
            ["tenant_id", "owner_id"],
            ["app_user.tenant_id", "app_user.id"],
            name="fk_task_owner_same_tenant",
        ),
        UniqueConstraint("tenant_id", "dedup_key", name="uq_task_tenant_dedup"),
        UniqueConstraint("tenant_id", "id", name="uq_task_tenant_id"),
        enum_check("priority", Priority.values(), "task_priority_check"),
        enum_check("status", TaskStatus.values(), "task_status_check"),
        Index("ix_task_tenant_owner", "tenant_id", "owner_id"),
        Index("ix_task_updated_at", "updated_at"),
    )
