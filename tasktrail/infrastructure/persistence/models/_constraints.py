"""Helpers for CHECK constraints over enumerated domains."""

from collections.abc import Iterable

from sqlalchemy import CheckConstraint


def enum_check(column: str, values: Iterable[str], name: str) -> CheckConstraint:
    """Return CHECK (column IN (...)) with values quoted as SQL literals."""
    return CheckConstraint(
        "{} IN ({})".format(
            column,
            ", ".join("'{}'".format(v.replace("'", "''")) for v in values),
        ),
        name=name,
    )
