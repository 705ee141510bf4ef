"""User ORM model (tenant-scoped, role Employee or Manager)."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from tasktrail.domain.enums import Role
from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models._constraints import enum_check
from tasktrail.infrastructure.persistence.models.mixins import MultiTenantModel


class User(MultiTenantModel, Base):
    """User model. Table: app_user. Unique (tenant_id, username).

    (tenant_id, id) is unique as well so tenant-scoped tables can reference a
    user together with its tenant; the store then rejects a task owner or a
    grantee from another tenant.
    """

    __tablename__ = "app_user"

    username: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "username", name="uq_app_user_tenant_username"),
        UniqueConstraint("tenant_id", "id", name="uq_app_user_tenant_id"),
        enum_check("role", Role.values(), "app_user_role_check"),
    )
