"""Permission grant ORM model: one task shared with one user of the same tenant."""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    ForeignKeyConstraint,
    Index,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models.mixins import CuidMixin, TenantMixin


class PermissionGrant(CuidMixin, TenantMixin, Base):
    """Grant of visibility. Table: permission_grant. Unique (task_id, shared_with)."""

    __tablename__ = "permission_grant"

    task_id: Mapped[str] = mapped_column(String, nullable=False)
    shared_with: Mapped[str] = mapped_column(String, nullable=False)
    granted_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        ForeignKeyConstraint(
            ["tenant_id", "task_id"],
            ["task.tenant_id", "task.id"],
            name="fk_permission_grant_task_same_tenant",
        ),
        ForeignKeyConstraint(
            ["tenant_id", "shared_with"],
            ["app_user.tenant_id", "app_user.id"],
            name="fk_permission_grant_user_same_tenant",
        ),
        UniqueConstraint("task_id", "shared_with", name="uq_permission_grant_task_user"),
        Index("ix_permission_grant_shared_with", "shared_with"),
    )
