"""Visibility: which active tasks a user may see."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tasktrail.application.dtos.task import TaskResult
    from tasktrail.application.interfaces.repositories import IUnitOfWorkFactory

logger = logging.getLogger(__name__)


class VisibilityResolver:
    """Managers see every active task of their tenant; employees see tasks they
    own plus tasks shared with them, each once."""

    def __init__(self, uow_factory: "IUnitOfWorkFactory") -> None:
        self._uow_factory = uow_factory

    async def get_visible_tasks(self, user_id: str) -> list["TaskResult"]:
        """Return the tasks visible to user_id from one snapshot; [] for unknown users."""
        async with self._uow_factory(read_only=True) as uow:
            user = await uow.users.get_by_id(user_id)
            if user is None:
                logger.debug("Visibility requested for unknown user %s", user_id)
                return []
            if user.is_manager:
                tasks = await uow.tasks.list_by_tenant(user.tenant_id)
            else:
                tasks = await uow.tasks.list_owned_or_shared(user.tenant_id, user.id)
        logger.debug("User %s sees %d task(s)", user_id, len(tasks))
        return tasks
