"""Unit tests for task operation helpers (title validation and change diff)."""

from datetime import UTC, datetime

import pytest

from tasktrail.application.dtos.task import TaskResult
from tasktrail.application.use_cases.tasks.task_operations import _diff, _validate_title
from tasktrail.domain.enums import Priority, TaskStatus
from tasktrail.domain.exceptions import ValidationException

NOW = datetime(2025, 5, 1, tzinfo=UTC)


def _task(**overrides) -> TaskResult:
    fields = dict(
        id="task-1",
        tenant_id="t1",
        owner_id="u1",
        title="Write report",
        priority=Priority.MEDIUM,
        description="Q3 numbers",
        status=TaskStatus.PENDING,
        created_at=NOW,
        updated_at=NOW,
        version=1,
    )
    fields.update(overrides)
    return TaskResult(**fields)


class TestValidateTitle:
    def test_valid_title(self) -> None:
        assert _validate_title("Write report") == "Write report"

    @pytest.mark.parametrize("title", ["", "   "])
    def test_blank_title_rejected(self, title: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _validate_title(title)
        assert exc_info.value.details == {"field": "title"}

    def test_title_longer_than_255_rejected(self) -> None:
        _validate_title("x" * 255)
        with pytest.raises(ValidationException, match="at most 255"):
            _validate_title("x" * 256)


class TestDiff:
    def test_all_fields_changed_in_fixed_order(self) -> None:
        changes, lines = _diff(
            _task(), "New title", Priority.HIGH, "Q4 numbers", TaskStatus.COMPLETED
        )
        assert lines == [
            'Title changed from "Write report" to "New title"',
            'Priority changed from "Medium" to "High"',
            "Description updated",
            'Status changed from "Pending" to "Completed"',
        ]
        assert changes.title == "New title"
        assert changes.priority is Priority.HIGH
        assert changes.description == "Q4 numbers"
        assert changes.status is TaskStatus.COMPLETED

    def test_same_values_are_not_changes(self) -> None:
        changes, lines = _diff(
            _task(), "Write report", Priority.MEDIUM, "Q3 numbers", TaskStatus.PENDING
        )
        assert changes.is_empty()
        assert lines == []

    def test_none_means_not_supplied(self) -> None:
        changes, lines = _diff(_task(), None, None, None, TaskStatus.IN_PROGRESS)
        assert lines == ['Status changed from "Pending" to "InProgress"']
        assert changes.title is None
        assert changes.status is TaskStatus.IN_PROGRESS

    def test_description_set_on_task_without_one(self) -> None:
        _, lines = _diff(_task(description=None), None, None, "", None)
        assert lines == ["Description updated"]
