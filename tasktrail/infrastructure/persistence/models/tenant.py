"""Tenant ORM model. Root entity for multi-tenant hierarchy (no tenant_id)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from tasktrail.infrastructure.persistence.database import Base
from tasktrail.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Tenant(CuidMixin, TimestampMixin, Base):
    """Root tenant entity. Table: tenant."""

    __tablename__ = "tenant"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
