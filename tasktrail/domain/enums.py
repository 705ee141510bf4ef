"""Domain enumerations for tasktrail.

Enums represent the enumerated domains enforced by the store: user role,
task priority and task status. Values are stored verbatim in the database.
"""

from enum import Enum
from typing import Self

from tasktrail.domain.exceptions import InvalidFieldValueException

# Field name reported in InvalidFieldValueException, by enum class name.
_FIELD_NAMES = {"Role": "role", "Priority": "priority", "TaskStatus": "status"}


class _ValuesMixin:
    """Mixin that adds values() and parse() classmethods to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]  # type: ignore[attr-defined]

    @classmethod
    def parse(cls, value: object) -> Self:
        """Return the member for value; raise InvalidFieldValueException if unknown."""
        try:
            return cls(value)  # type: ignore[call-arg]
        except ValueError:
            raise InvalidFieldValueException(
                field=_FIELD_NAMES.get(cls.__name__, cls.__name__.lower()),
                value=value,
                allowed=cls.values(),
            ) from None


class Role(_ValuesMixin, str, Enum):
    """User role. Immutable once the user exists."""

    EMPLOYEE = "Employee"
    MANAGER = "Manager"


class Priority(_ValuesMixin, str, Enum):
    """Task priority."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(_ValuesMixin, str, Enum):
    """Task lifecycle status."""

    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
