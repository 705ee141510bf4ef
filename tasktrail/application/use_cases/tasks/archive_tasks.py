"""Archive stale tasks: move tasks not updated since a cutoff into archived_task."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from tasktrail.application.dtos.archival import ArchivalRunResult
from tasktrail.domain.exceptions import (
    ArchivalTransactionFailure,
    TransactionTimeoutException,
    ValidationException,
)
from tasktrail.shared.utils.datetime import ensure_utc, utc_now

if TYPE_CHECKING:
    from tasktrail.application.interfaces.repositories import IUnitOfWorkFactory

logger = logging.getLogger(__name__)

# Ids handled per statement; all batches still share one transaction
ARCHIVAL_BATCH_SIZE = 500


class ArchivalJob:
    """Moves every active task with updated_at < cutoff to archived_task.

    The whole run is a single unit of work. The candidate ids are read (and
    locked where the store supports it) first; the final delete repeats the
    cutoff predicate, so a task updated concurrently is not removed. If fewer
    rows are deleted than were snapshotted, the run is rolled back.
    """

    def __init__(
        self,
        uow_factory: "IUnitOfWorkFactory",
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    async def archive_tasks_older_than(self, cutoff: datetime) -> int:
        """Archive stale tasks and return how many were moved."""
        result = await self.run(cutoff)
        return result.archived_count

    async def run(self, cutoff: datetime) -> ArchivalRunResult:
        """Archive stale tasks and return the ids that were moved.

        Raises:
            ValidationException: cutoff is naive.
            TransactionTimeoutException: the unit exceeded its time limit.
            ArchivalTransactionFailure: any other failure; nothing was archived.
        """
        if cutoff.tzinfo is None:
            raise ValidationException("cutoff must be timezone-aware", field="cutoff")
        cutoff = ensure_utc(cutoff)
        try:
            async with self._uow_factory() as uow:
                task_ids = await uow.tasks.list_stale_ids(cutoff)
                archived_at = self._clock()
                for start in range(0, len(task_ids), ARCHIVAL_BATCH_SIZE):
                    batch = task_ids[start : start + ARCHIVAL_BATCH_SIZE]
                    copied = await uow.archived_tasks.snapshot_tasks(batch, archived_at)
                    await uow.grants.delete_for_tasks(batch)
                    await uow.history.delete_for_tasks(batch)
                    deleted = await uow.tasks.delete_stale(batch, cutoff)
                    if copied != len(batch) or deleted != len(batch):
                        raise ArchivalTransactionFailure(
                            f"expected {len(batch)} task(s), copied {copied}, deleted {deleted}",
                            cutoff.isoformat(),
                        )
        except (ArchivalTransactionFailure, TransactionTimeoutException):
            logger.exception("Archival run for cutoff %s rolled back", cutoff.isoformat())
            raise
        except Exception as exc:
            logger.exception("Archival run for cutoff %s failed", cutoff.isoformat())
            raise ArchivalTransactionFailure(str(exc), cutoff.isoformat()) from exc
        logger.info(
            "Archived %d task(s) not updated since %s", len(task_ids), cutoff.isoformat()
        )
        return ArchivalRunResult(cutoff=cutoff, archived_task_ids=tuple(task_ids))
