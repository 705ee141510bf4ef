"""Tests for domain enums (Role, Priority, TaskStatus) and parse()."""

import pytest

from tasktrail.domain.enums import Priority, Role, TaskStatus
from tasktrail.domain.exceptions import InvalidFieldValueException


class TestValues:
    def test_role_values(self) -> None:
        assert Role.values() == ["Employee", "Manager"]

    def test_priority_values(self) -> None:
        assert Priority.values() == ["Low", "Medium", "High"]

    def test_status_values(self) -> None:
        assert TaskStatus.values() == ["Pending", "InProgress", "Completed"]


class TestParse:
    def test_parse_string(self) -> None:
        assert Priority.parse("High") is Priority.HIGH
        assert TaskStatus.parse("InProgress") is TaskStatus.IN_PROGRESS

    def test_parse_member_returns_member(self) -> None:
        assert Role.parse(Role.MANAGER) is Role.MANAGER

    def test_parse_is_case_sensitive(self) -> None:
        with pytest.raises(InvalidFieldValueException):
            Priority.parse("high")

    @pytest.mark.parametrize(
        "enum_cls, field",
        [(Role, "role"), (Priority, "priority"), (TaskStatus, "status")],
    )
    def test_unknown_value_reports_field(self, enum_cls, field: str) -> None:
        with pytest.raises(InvalidFieldValueException) as exc_info:
            enum_cls.parse("Bogus")
        assert exc_info.value.details["field"] == field
        assert exc_info.value.details["value"] == "Bogus"
        assert exc_info.value.details["allowed"] == enum_cls.values()

    def test_members_compare_equal_to_stored_strings(self) -> None:
        assert TaskStatus.COMPLETED == "Completed"
