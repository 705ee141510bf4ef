"""TaskService integration tests against a SQLite store."""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from tasktrail.application.use_cases.tasks import TaskService
from tasktrail.core.lifespan import Services
from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.domain.exceptions import (
    ConcurrentModificationConflict,
    DuplicateTaskException,
    InvalidFieldValueException,
    ResourceNotFoundException,
    TaskNotFoundException,
    TenantMismatchException,
    ValidationException,
)
from tasktrail.infrastructure.persistence.repositories.task_repo import TaskRepository


async def _get_task(uow_factory, task_id):
    async with uow_factory(read_only=True) as uow:
        return await uow.tasks.get_by_id(task_id)


class TestCreateTask:
    async def test_create_sets_fields_and_timestamps(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Write report", "High", "Q3", "Pending"
        )
        task = await _get_task(uow_factory, task_id)
        assert task is not None
        assert task.tenant_id == directory.acme.id
        assert task.owner_id == directory.alice.id
        assert task.title == "Write report"
        assert task.priority is Priority.HIGH
        assert task.description == "Q3"
        assert task.status is TaskStatus.PENDING
        assert task.created_at == task.updated_at
        assert task.created_at.tzinfo is not None
        assert task.version == 1

    async def test_create_writes_no_history(self, services, directory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Write report", "Low"
        )
        assert await services.tasks.get_task_history(task_id) == []

    async def test_duplicate_tuple_rejected(self, services, directory) -> None:
        args = (directory.acme.id, directory.alice.id, "Write report", "Low", "Q3")
        await services.tasks.create_task(*args)
        with pytest.raises(DuplicateTaskException):
            await services.tasks.create_task(*args)

    async def test_duplicate_ignores_priority_and_status(self, services, directory) -> None:
        await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Write report", "Low", "Q3", "Pending"
        )
        with pytest.raises(DuplicateTaskException):
            await services.tasks.create_task(
                directory.acme.id, directory.alice.id, "Write report", "High", "Q3", "Completed"
            )

    async def test_same_title_other_owner_or_description_allowed(self, services, directory) -> None:
        await services.tasks.create_task(directory.acme.id, directory.alice.id, "Report", "Low", "Q3")
        await services.tasks.create_task(directory.acme.id, directory.bob.id, "Report", "Low", "Q3")
        await services.tasks.create_task(directory.acme.id, directory.alice.id, "Report", "Low", "Q4")

    async def test_missing_description_distinct_from_empty(self, services, directory) -> None:
        await services.tasks.create_task(directory.acme.id, directory.alice.id, "Report", "Low", None)
        await services.tasks.create_task(directory.acme.id, directory.alice.id, "Report", "Low", "")
        with pytest.raises(DuplicateTaskException):
            await services.tasks.create_task(
                directory.acme.id, directory.alice.id, "Report", "Low", None
            )

    async def test_concurrent_duplicate_creates_exactly_one(self, services, directory, uow_factory) -> None:
        args = (directory.acme.id, directory.alice.id, "Race", "Medium", "same")
        results = await asyncio.gather(
            services.tasks.create_task(*args),
            services.tasks.create_task(*args),
            return_exceptions=True,
        )
        created = [r for r in results if isinstance(r, str)]
        failed = [r for r in results if isinstance(r, BaseException)]
        assert len(created) == 1
        assert len(failed) == 1
        assert isinstance(failed[0], DuplicateTaskException)
        async with uow_factory(read_only=True) as uow:
            tasks = await uow.tasks.list_by_tenant(directory.acme.id)
        assert [t.id for t in tasks] == created

    async def test_constraint_rejects_duplicate_missed_by_check(
        self, services, directory, uow_factory, monkeypatch
    ) -> None:
        """A duplicate committed after the existence check still fails on the unique key."""

        async def _not_seen(self, tenant_id, dedup_key):
            return False

        args = (directory.acme.id, directory.alice.id, "Race", "Medium", "same")
        first = await services.tasks.create_task(*args)
        monkeypatch.setattr(TaskRepository, "exists_with_dedup_key", _not_seen)
        with pytest.raises(DuplicateTaskException):
            await services.tasks.create_task(*args)
        async with uow_factory(read_only=True) as uow:
            tasks = await uow.tasks.list_by_tenant(directory.acme.id)
        assert [t.id for t in tasks] == [first]

    async def test_invalid_priority_rejected(self, services, directory) -> None:
        with pytest.raises(InvalidFieldValueException) as exc_info:
            await services.tasks.create_task(
                directory.acme.id, directory.alice.id, "Report", "Urgent"
            )
        assert exc_info.value.details["field"] == "priority"

    async def test_invalid_status_rejected(self, services, directory) -> None:
        with pytest.raises(InvalidFieldValueException) as exc_info:
            await services.tasks.create_task(
                directory.acme.id, directory.alice.id, "Report", "Low", None, "Done"
            )
        assert exc_info.value.details["field"] == "status"

    async def test_blank_title_rejected(self, services, directory) -> None:
        with pytest.raises(ValidationException):
            await services.tasks.create_task(directory.acme.id, directory.alice.id, " ", "Low")

    async def test_owner_from_other_tenant_rejected(self, services, directory, uow_factory) -> None:
        with pytest.raises(TenantMismatchException):
            await services.tasks.create_task(directory.acme.id, directory.gina.id, "Report", "Low")
        async with uow_factory(read_only=True) as uow:
            assert await uow.tasks.list_by_tenant(directory.acme.id) == []

    async def test_unknown_owner_rejected(self, services, directory) -> None:
        with pytest.raises(ResourceNotFoundException):
            await services.tasks.create_task(directory.acme.id, "no-such-user", "Report", "Low")


class TestUpdateTask:
    async def _create(self, services: Services, directory) -> str:
        return await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Write report", "Medium", "Q3", "Pending"
        )

    async def test_one_entry_per_changed_field(self, services, directory, uow_factory) -> None:
        task_id = await self._create(services, directory)
        await services.tasks.update_task(
            task_id,
            directory.manager.id,
            title="Write final report",
            priority="High",
            description="Q3 and Q4",
            status="InProgress",
        )
        history = await services.tasks.get_task_history(task_id)
        assert [h.change_description for h in history] == [
            'Title changed from "Write report" to "Write final report"',
            'Priority changed from "Medium" to "High"',
            "Description updated",
            'Status changed from "Pending" to "InProgress"',
        ]
        assert {h.changed_by for h in history} == {directory.manager.id}
        task = await _get_task(uow_factory, task_id)
        assert task.title == "Write final report"
        assert task.priority is Priority.HIGH
        assert task.description == "Q3 and Q4"
        assert task.status is TaskStatus.IN_PROGRESS
        assert task.version == 2
        assert task.updated_at >= task.created_at

    async def test_only_actual_changes_recorded(self, services, directory) -> None:
        task_id = await self._create(services, directory)
        await services.tasks.update_task(
            task_id, directory.alice.id, title="Write report", status="Completed"
        )
        history = await services.tasks.get_task_history(task_id)
        assert [h.change_description for h in history] == [
            'Status changed from "Pending" to "Completed"'
        ]

    async def test_no_op_update_leaves_task_untouched(self, directory, uow_factory, services) -> None:
        task_id = await self._create(services, directory)
        before = await _get_task(uow_factory, task_id)
        await services.tasks.update_task(
            task_id,
            directory.alice.id,
            title="Write report",
            priority=Priority.MEDIUM,
            description="Q3",
            status=TaskStatus.PENDING,
        )
        await services.tasks.update_task(task_id, directory.alice.id)
        after = await _get_task(uow_factory, task_id)
        assert after == before
        assert await services.tasks.get_task_history(task_id) == []

    async def test_unknown_task(self, services, directory) -> None:
        with pytest.raises(TaskNotFoundException):
            await services.tasks.update_task("missing", directory.alice.id, title="x")

    async def test_invalid_status_rejected_before_any_write(self, services, directory, uow_factory) -> None:
        task_id = await self._create(services, directory)
        with pytest.raises(InvalidFieldValueException):
            await services.tasks.update_task(task_id, directory.alice.id, title="New", status="Done")
        assert (await _get_task(uow_factory, task_id)).title == "Write report"

    async def test_actor_from_other_tenant_rejected(self, services, directory) -> None:
        task_id = await self._create(services, directory)
        with pytest.raises(TenantMismatchException):
            await services.tasks.update_task(task_id, directory.gina.id, title="Hijacked")
        assert await services.tasks.get_task_history(task_id) == []

    async def test_change_colliding_with_other_task_is_duplicate(self, services, directory, uow_factory) -> None:
        await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Other", "Low", "Q3"
        )
        task_id = await self._create(services, directory)
        with pytest.raises(DuplicateTaskException):
            await services.tasks.update_task(task_id, directory.alice.id, title="Other")
        assert (await _get_task(uow_factory, task_id)).title == "Write report"
        assert await services.tasks.get_task_history(task_id) == []

    async def test_concurrent_updates_serialize(self, services, directory, uow_factory) -> None:
        task_id = await self._create(services, directory)
        await asyncio.gather(
            services.tasks.update_task(task_id, directory.alice.id, title="From alice"),
            services.tasks.update_task(task_id, directory.bob.id, status="Completed"),
        )
        task = await _get_task(uow_factory, task_id)
        assert task.title == "From alice"
        assert task.status is TaskStatus.COMPLETED
        assert task.version == 3
        history = await services.tasks.get_task_history(task_id)
        assert len(history) == 2

    async def test_stale_version_is_conflict(self, services, directory, uow_factory, monkeypatch) -> None:
        task_id = await self._create(services, directory)
        before = await _get_task(uow_factory, task_id)

        async def _lost_race(self, task_id, expected_version, changes, *, dedup_key, updated_at):
            return False

        monkeypatch.setattr(TaskRepository, "apply_changes", _lost_race)
        with pytest.raises(ConcurrentModificationConflict) as exc_info:
            await services.tasks.update_task(task_id, directory.alice.id, title="Too late")
        assert exc_info.value.retryable is True
        assert await _get_task(uow_factory, task_id) == before
        assert await services.tasks.get_task_history(task_id) == []

    async def test_history_dates_do_not_decrease_under_clock_skew(self, directory, uow_factory) -> None:
        t0 = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
        earlier = t0 - timedelta(minutes=5)
        # create; update 1 (updated_at, history); update 2 (updated_at, history)
        times = iter([t0, t0, t0, earlier, earlier])
        service = TaskService(uow_factory, clock=lambda: next(times))
        task_id = await service.create_task(directory.acme.id, directory.alice.id, "Skew", "Low")
        await service.update_task(task_id, directory.alice.id, status="InProgress")
        await service.update_task(task_id, directory.alice.id, status="Completed")
        history = await service.get_task_history(task_id)
        assert [h.change_date for h in history] == [t0, t0]
        assert [h.change_description for h in history] == [
            'Status changed from "Pending" to "InProgress"',
            'Status changed from "InProgress" to "Completed"',
        ]


class TestDeleteTask:
    async def test_delete_removes_task_grants_and_history(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Doomed", "Low"
        )
        await services.tasks.share_task(task_id, directory.bob.id)
        await services.tasks.update_task(task_id, directory.alice.id, priority="High")

        await services.tasks.delete_task(task_id, directory.manager.id)

        async with uow_factory(read_only=True) as uow:
            assert await uow.tasks.get_by_id(task_id) is None
            assert await uow.grants.list_for_task(task_id) == []
            assert await uow.history.list_for_task(task_id) == []
            preserved = await uow.deleted_history.list_for_task(task_id)
        assert [p.change_description for p in preserved] == [
            f"Task shared with user ID {directory.bob.id}",
            'Priority changed from "Low" to "High"',
            "Task deleted",
        ]
        assert preserved[-1].changed_by == directory.manager.id
        assert {p.tenant_id for p in preserved} == {directory.acme.id}

    async def test_deleted_task_no_longer_visible_or_duplicate(self, services, directory) -> None:
        args = (directory.acme.id, directory.alice.id, "Again", "Low")
        task_id = await services.tasks.create_task(*args)
        await services.tasks.delete_task(task_id, directory.alice.id)
        assert await services.visibility.get_visible_tasks(directory.alice.id) == []
        assert await services.tasks.create_task(*args) != task_id

    async def test_delete_unknown_task(self, services, directory) -> None:
        with pytest.raises(TaskNotFoundException):
            await services.tasks.delete_task("missing", directory.alice.id)

    async def test_delete_twice(self, services, directory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Once", "Low"
        )
        await services.tasks.delete_task(task_id, directory.alice.id)
        with pytest.raises(TaskNotFoundException):
            await services.tasks.delete_task(task_id, directory.alice.id)

    async def test_delete_by_unknown_user_rolls_back(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Kept", "Low"
        )
        with pytest.raises(ResourceNotFoundException):
            await services.tasks.delete_task(task_id, "ghost")
        assert await _get_task(uow_factory, task_id) is not None
        assert await services.tasks.get_task_history(task_id) == []


class TestShareTask:
    async def test_share_grants_and_records(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        assert await services.tasks.share_task(task_id, directory.bob.id) is True
        history = await services.tasks.get_task_history(task_id)
        assert [h.change_description for h in history] == [
            f"Task shared with user ID {directory.bob.id}"
        ]
        assert history[0].changed_by == directory.bob.id
        async with uow_factory(read_only=True) as uow:
            grants = await uow.grants.list_for_task(task_id)
        assert [g.shared_with for g in grants] == [directory.bob.id]
        assert grants[0].granted_by is None

    async def test_share_is_idempotent(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        assert await services.tasks.share_task(task_id, directory.bob.id) is True
        assert await services.tasks.share_task(task_id, directory.bob.id) is False
        assert len(await services.tasks.get_task_history(task_id)) == 1
        async with uow_factory(read_only=True) as uow:
            assert len(await uow.grants.list_for_task(task_id)) == 1

    async def test_concurrent_shares_grant_once(self, services, directory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        results = await asyncio.gather(
            services.tasks.share_task(task_id, directory.bob.id),
            services.tasks.share_task(task_id, directory.bob.id),
        )
        assert sorted(results) == [False, True]
        assert len(await services.tasks.get_task_history(task_id)) == 1

    async def test_share_attributed_to_sharer(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        await services.tasks.share_task(task_id, directory.bob.id, shared_by=directory.alice.id)
        history = await services.tasks.get_task_history(task_id)
        assert history[0].changed_by == directory.alice.id
        async with uow_factory(read_only=True) as uow:
            grants = await uow.grants.list_for_task(task_id)
        assert grants[0].granted_by == directory.alice.id

    async def test_share_with_other_tenant_rejected(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Private", "Low"
        )
        with pytest.raises(TenantMismatchException):
            await services.tasks.share_task(task_id, directory.gina.id)
        async with uow_factory(read_only=True) as uow:
            assert await uow.grants.list_for_task(task_id) == []
        assert await services.visibility.get_visible_tasks(directory.gina.id) == []

    async def test_share_unknown_task(self, services, directory) -> None:
        with pytest.raises(TaskNotFoundException):
            await services.tasks.share_task("missing", directory.bob.id)

    async def test_share_with_unknown_user(self, services, directory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        with pytest.raises(ResourceNotFoundException):
            await services.tasks.share_task(task_id, "ghost")

    async def test_share_of_task_removed_after_read(self, services, directory, uow_factory, monkeypatch) -> None:
        """The grant insert fails on the task FK; that is not an existing grant."""
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Vanishing", "Low"
        )
        stale = await _get_task(uow_factory, task_id)
        await services.tasks.delete_task(task_id, directory.alice.id)

        async def _stale_read(self, task_id, *, for_update=False):
            return stale

        monkeypatch.setattr(TaskRepository, "get_by_id", _stale_read)
        with pytest.raises(TaskNotFoundException):
            await services.tasks.share_task(task_id, directory.bob.id)
        monkeypatch.undo()
        async with uow_factory(read_only=True) as uow:
            assert await uow.grants.list_for_task(task_id) == []
            assert await uow.history.list_for_task(task_id) == []


class TestCreateGrantIfAbsent:
    async def test_existing_pair_returns_none(self, services, directory, uow_factory) -> None:
        task_id = await services.tasks.create_task(
            directory.acme.id, directory.alice.id, "Shared", "Low"
        )
        async with uow_factory() as uow:
            first = await uow.grants.create_if_absent(directory.acme.id, task_id, directory.bob.id)
            second = await uow.grants.create_if_absent(directory.acme.id, task_id, directory.bob.id)
        assert first is not None
        assert second is None
        async with uow_factory(read_only=True) as uow:
            assert len(await uow.grants.list_for_task(task_id)) == 1

    async def test_missing_task_raises(self, directory, uow_factory) -> None:
        with pytest.raises(IntegrityError):
            async with uow_factory() as uow:
                await uow.grants.create_if_absent(directory.acme.id, "no-such-task", directory.bob.id)


async def test_history_of_unknown_task_is_empty(services) -> None:
    assert await services.tasks.get_task_history("missing") == []
