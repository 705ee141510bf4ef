"""DTOs for tenants and users (directory)."""

from __future__ import annotations

from dataclasses import dataclass

from tasktrail.domain.enums import Role


@dataclass(frozen=True)
class TenantResult:
    """Tenant read model."""

    id: str
    name: str


@dataclass(frozen=True)
class UserResult:
    """User read model. Role is immutable."""

    id: str
    tenant_id: str
    username: str
    role: Role

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER
