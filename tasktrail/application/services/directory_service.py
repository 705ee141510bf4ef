"""Directory service: provisions tenants and their users."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tasktrail.domain.enums import Role
from tasktrail.domain.exceptions import ResourceNotFoundException, ValidationException

if TYPE_CHECKING:
    from tasktrail.application.dtos.tenant import TenantResult, UserResult
    from tasktrail.application.interfaces.repositories import IUnitOfWorkFactory

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 255


def _require_name(value: str, field: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValidationException(f"{field} must not be empty", field=field)
    if len(stripped) > MAX_NAME_LENGTH:
        raise ValidationException(
            f"{field} must be at most {MAX_NAME_LENGTH} characters", field=field
        )
    return stripped


class DirectoryService:
    """Create tenants and users; look users up by id."""

    def __init__(self, uow_factory: "IUnitOfWorkFactory") -> None:
        self._uow_factory = uow_factory

    async def create_tenant(self, name: str) -> "TenantResult":
        """Create a tenant with the given display name."""
        name = _require_name(name, "name")
        async with self._uow_factory() as uow:
            tenant = await uow.tenants.create_tenant(name)
        logger.info("Created tenant %s (%s)", tenant.id, tenant.name)
        return tenant

    async def create_user(
        self, tenant_id: str, username: str, role: Role | str
    ) -> "UserResult":
        """Create a user in the tenant.

        Raises ResourceNotFoundException if the tenant does not exist,
        InvalidFieldValueException for an unknown role and
        UserAlreadyExistsException if the username is taken in the tenant.
        """
        parsed_role = Role.parse(role)
        username = _require_name(username, "username")
        async with self._uow_factory() as uow:
            if await uow.tenants.get_by_id(tenant_id) is None:
                raise ResourceNotFoundException("tenant", tenant_id)
            user = await uow.users.create_user(tenant_id, username, parsed_role)
        logger.info(
            "Created user %s (%s) in tenant %s as %s",
            user.id,
            user.username,
            tenant_id,
            user.role.value,
        )
        return user

    async def get_user(self, user_id: str) -> "UserResult | None":
        """Return the user or None."""
        async with self._uow_factory(read_only=True) as uow:
            return await uow.users.get_by_id(user_id)
