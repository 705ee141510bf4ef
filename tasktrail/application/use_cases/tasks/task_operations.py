"""Task operations: create, update, delete, share.

Each public method is one unit of work: the reads it depends on, the row
writes, the cascades and every history entry commit together or not at all.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from tasktrail.application.dtos.task import TaskChanges
from tasktrail.application.services.audit_recorder import AuditRecorder
from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.domain.exceptions import (
    ConcurrentModificationConflict,
    DuplicateTaskException,
    ResourceNotFoundException,
    TaskNotFoundException,
    TenantMismatchException,
    ValidationException,
)
from tasktrail.shared.utils.datetime import utc_now
from tasktrail.shared.utils.hashing import task_dedup_key

if TYPE_CHECKING:
    from tasktrail.application.dtos.task import TaskHistoryResult, TaskResult
    from tasktrail.application.dtos.tenant import UserResult
    from tasktrail.application.interfaces.repositories import (
        IUnitOfWork,
        IUnitOfWorkFactory,
    )

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 255
TASK_DELETED = "Task deleted"


def _validate_title(title: str) -> str:
    if not title or not title.strip():
        raise ValidationException("Title must not be empty", field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationException(
            f"Title must be at most {MAX_TITLE_LENGTH} characters", field="title"
        )
    return title


def _diff(
    task: "TaskResult",
    title: str | None,
    priority: Priority | None,
    description: str | None,
    status: TaskStatus | None,
) -> tuple[TaskChanges, list[str]]:
    """Return the fields that actually change and one history line per change."""
    lines: list[str] = []
    new_title = new_priority = new_description = new_status = None
    if title is not None and title != task.title:
        new_title = title
        lines.append(f'Title changed from "{task.title}" to "{title}"')
    if priority is not None and priority is not task.priority:
        new_priority = priority
        lines.append(
            f'Priority changed from "{task.priority.value}" to "{priority.value}"'
        )
    if description is not None and description != task.description:
        new_description = description
        lines.append("Description updated")
    if status is not None and status is not task.status:
        new_status = status
        lines.append(f'Status changed from "{task.status.value}" to "{status.value}"')
    changes = TaskChanges(
        title=new_title,
        priority=new_priority,
        description=new_description,
        status=new_status,
    )
    return changes, lines


async def _require_member(uow: "IUnitOfWork", user_id: str, tenant_id: str) -> "UserResult":
    """Return the user; raise if unknown or not in tenant_id."""
    user = await uow.users.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundException("user", user_id)
    if user.tenant_id != tenant_id:
        raise TenantMismatchException(user_id, tenant_id)
    return user


class TaskService:
    """Transactional task mutations with audit capture.

    Actor identity is always an explicit argument. History is written only
    through AuditRecorder, inside the same unit of work as the change it
    describes.
    """

    def __init__(
        self,
        uow_factory: "IUnitOfWorkFactory",
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    async def create_task(
        self,
        tenant_id: str,
        owner_id: str,
        title: str,
        priority: Priority | str,
        description: str | None = None,
        status: TaskStatus | str = TaskStatus.PENDING,
    ) -> str:
        """Create a task and return its id.

        Raises InvalidFieldValueException for an unknown priority/status,
        ResourceNotFoundException / TenantMismatchException when the owner is
        unknown or belongs to another tenant, and DuplicateTaskException when
        an active task with the same (tenant, owner, title, description)
        exists, including one committed concurrently after our check.
        """
        parsed_priority = Priority.parse(priority)
        parsed_status = TaskStatus.parse(status)
        _validate_title(title)
        dedup_key = task_dedup_key(tenant_id, owner_id, title, description)
        try:
            async with self._uow_factory() as uow:
                await _require_member(uow, owner_id, tenant_id)
                if await uow.tasks.exists_with_dedup_key(tenant_id, dedup_key):
                    raise DuplicateTaskException(tenant_id, owner_id, title)
                task = await uow.tasks.create(
                    tenant_id,
                    owner_id,
                    title,
                    parsed_priority,
                    description,
                    parsed_status,
                    dedup_key=dedup_key,
                    now=self._clock(),
                )
        except IntegrityError:
            logger.warning(
                "Duplicate task rejected by constraint (tenant=%s, owner=%s)",
                tenant_id,
                owner_id,
            )
            raise DuplicateTaskException(tenant_id, owner_id, title) from None
        logger.info("Created task %s for owner %s in tenant %s", task.id, owner_id, tenant_id)
        return task.id

    async def update_task(
        self,
        task_id: str,
        updated_by: str,
        *,
        title: str | None = None,
        priority: Priority | str | None = None,
        description: str | None = None,
        status: TaskStatus | str | None = None,
    ) -> None:
        """Change the supplied fields; record one history entry per changed field.

        Fields left as None are not touched, so a description cannot be cleared
        back to NULL here; pass "" to blank it. If nothing differs from the
        stored values, no row is written, updated_at stays and no history is
        added.
        Raises TaskNotFoundException, ConcurrentModificationConflict (another
        transaction changed the task after it was read) and
        DuplicateTaskException (the new title/description collide).
        """
        parsed_priority = Priority.parse(priority) if priority is not None else None
        parsed_status = TaskStatus.parse(status) if status is not None else None
        if title is not None:
            _validate_title(title)
        try:
            async with self._uow_factory() as uow:
                task = await uow.tasks.get_by_id(task_id, for_update=True)
                if task is None:
                    raise TaskNotFoundException(task_id)
                await _require_member(uow, updated_by, task.tenant_id)
                changes, lines = _diff(
                    task, title, parsed_priority, description, parsed_status
                )
                if changes.is_empty():
                    logger.debug("Update of task %s changed nothing", task_id)
                    return
                dedup_key = task_dedup_key(
                    task.tenant_id,
                    task.owner_id,
                    changes.title if changes.title is not None else task.title,
                    changes.description
                    if changes.description is not None
                    else task.description,
                )
                applied = await uow.tasks.apply_changes(
                    task_id,
                    task.version,
                    changes,
                    dedup_key=dedup_key,
                    updated_at=self._clock(),
                )
                if not applied:
                    logger.warning(
                        "Task %s changed after version %s was read", task_id, task.version
                    )
                    raise ConcurrentModificationConflict("task", task_id)
                await AuditRecorder(uow.history, self._clock).record_many(
                    task_id, updated_by, lines
                )
        except IntegrityError:
            raise DuplicateTaskException(
                task.tenant_id, task.owner_id, changes.title or task.title
            ) from None
        logger.info("Updated task %s (%d change(s)) by %s", task_id, len(lines), updated_by)

    async def delete_task(self, task_id: str, deleted_by: str) -> None:
        """Hard-delete the task with its grants and history.

        The "Task deleted" entry is recorded first and the whole trail,
        including that entry, is copied to deleted_task_history before the
        cascade, so the deletion stays auditable after the task is gone.
        """
        async with self._uow_factory() as uow:
            task = await uow.tasks.get_by_id(task_id, for_update=True)
            if task is None:
                raise TaskNotFoundException(task_id)
            await _require_member(uow, deleted_by, task.tenant_id)
            recorder = AuditRecorder(uow.history, self._clock)
            await recorder.record(task_id, deleted_by, TASK_DELETED)
            trail = await recorder.history(task_id)
            await uow.deleted_history.preserve(task.tenant_id, trail, self._clock())
            await uow.grants.delete_for_tasks([task_id])
            await uow.history.delete_for_tasks([task_id])
            if await uow.tasks.delete_by_ids([task_id]) != 1:
                raise ConcurrentModificationConflict("task", task_id)
        logger.info(
            "Deleted task %s by %s (%d history entries preserved)",
            task_id,
            deleted_by,
            len(trail),
        )

    async def share_task(
        self,
        task_id: str,
        shared_with: str,
        *,
        shared_by: str | None = None,
    ) -> bool:
        """Grant shared_with visibility of the task.

        Idempotent: returns False without writing history when the grant
        already exists. The history entry is attributed to shared_by when
        given, otherwise to the grantee. Raises TaskNotFoundException when the
        task is gone, including when it was deleted or archived between the
        read and the grant insert.
        """
        try:
            async with self._uow_factory() as uow:
                task = await uow.tasks.get_by_id(task_id, for_update=True)
                if task is None:
                    raise TaskNotFoundException(task_id)
                await _require_member(uow, shared_with, task.tenant_id)
                if shared_by is not None:
                    await _require_member(uow, shared_by, task.tenant_id)
                if await uow.grants.has_grant(task_id, shared_with):
                    logger.debug("Task %s already shared with %s", task_id, shared_with)
                    return False
                grant = await uow.grants.create_if_absent(
                    task.tenant_id, task_id, shared_with, granted_by=shared_by
                )
                if grant is None:
                    logger.debug("Concurrent share of task %s with %s", task_id, shared_with)
                    return False
                await AuditRecorder(uow.history, self._clock).record(
                    task_id,
                    shared_by or shared_with,
                    f"Task shared with user ID {shared_with}",
                )
        except IntegrityError:
            logger.warning("Grant on task %s rejected by constraint", task_id)
            raise TaskNotFoundException(task_id) from None
        logger.info("Shared task %s with %s", task_id, shared_with)
        return True

    async def get_task_history(self, task_id: str) -> list["TaskHistoryResult"]:
        """Return the audit trail of an active task (empty for unknown ids)."""
        async with self._uow_factory(read_only=True) as uow:
            return await AuditRecorder(uow.history, self._clock).history(task_id)
