"""User repository (tenant-scoped users with an immutable role)."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrail.application.dtos.tenant import UserResult
from tasktrail.domain.enums import Role
from tasktrail.domain.exceptions import UserAlreadyExistsException
from tasktrail.infrastructure.persistence.models.user import User
from tasktrail.infrastructure.persistence.repositories.base import BaseRepository


def _user_to_result(u: User) -> UserResult:
    return UserResult(
        id=u.id,
        tenant_id=u.tenant_id,
        username=u.username,
        role=Role(u.role),
    )


class UserRepository(BaseRepository[User]):
    """User repository. Implements IUserRepository."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def create_user(self, tenant_id: str, username: str, role: Role) -> UserResult:
        """Create a user; raises UserAlreadyExistsException if username is taken in tenant."""
        user = User(tenant_id=tenant_id, username=username, role=role.value)
        try:
            async with self.db.begin_nested():
                created = await self._create(user)
        except IntegrityError:
            raise UserAlreadyExistsException(tenant_id, username) from None
        return _user_to_result(created)

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self._get_orm_by_id(user_id)
        return _user_to_result(user) if user else None
