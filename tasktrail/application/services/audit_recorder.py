"""Audit recorder: the single path by which task history is written."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from tasktrail.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from tasktrail.application.dtos.task import TaskHistoryResult
    from tasktrail.application.interfaces.repositories import ITaskHistoryRepository


class AuditRecorder:
    """Appends immutable history entries inside the caller's unit of work.

    change_date never decreases within one task's history: if the clock reads
    earlier than the last recorded entry (clock skew between hosts), the last
    entry's date is reused and insertion order breaks the tie.
    """

    def __init__(
        self,
        history_repo: "ITaskHistoryRepository",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._history_repo = history_repo
        self._clock = clock

    async def record(
        self, task_id: str, actor_id: str, description: str
    ) -> "TaskHistoryResult":
        """Append one entry for task_id attributed to actor_id."""
        entries = await self.record_many(task_id, actor_id, [description])
        return entries[0]

    async def record_many(
        self, task_id: str, actor_id: str, descriptions: Sequence[str]
    ) -> list["TaskHistoryResult"]:
        """Append entries in the given order, all with the same change_date."""
        if not descriptions:
            return []
        change_date = await self._next_change_date(task_id)
        return [
            await self._history_repo.append(task_id, actor_id, change_date, description)
            for description in descriptions
        ]

    async def history(self, task_id: str) -> list["TaskHistoryResult"]:
        """Return the task's entries ordered by change_date, then insertion order."""
        return await self._history_repo.list_for_task(task_id)

    async def _next_change_date(self, task_id: str) -> datetime:
        now = self._clock()
        last = await self._history_repo.last_change_date(task_id)
        if last is not None and last > now:
            return last
        return now
