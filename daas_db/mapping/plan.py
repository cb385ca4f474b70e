"""Entity plan data classes.

Frozen dataclasses describing how one entity is stored: its table, its
declared columns and the LEFT JOINs fetched alongside it. Plans validate
themselves on construction so a bad declaration fails at import time rather
than producing malformed SQL later.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Protocol, TypeVar

from daas_db.core.enums import JoinKind
from daas_db.core.exceptions import ConfigurationError
from daas_db.core.query import check_identifier
from daas_db.mapping.joined import JoinedGroups, Row, joined_alias

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class EntityFactory(Protocol[T_co]):
    """Builds one entity from its own row, joined groups and extra data."""

    def __call__(
        self,
        row: Row,
        joins: JoinedGroups | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> T_co: ...


def _check_name(name: str, what: str) -> str:
    check_identifier(name)
    if "__" in name:
        raise ConfigurationError(f"{what} '{name}' must not contain '__'")
    return name


@dataclass(frozen=True)
class Join:
    """One outer relationship from the entity's table to another table."""

    origin_table: str
    origin_column: str
    target_table: str
    target_column: str
    target_columns: tuple[str, ...]
    kind: JoinKind = JoinKind.LEFT

    def __post_init__(self) -> None:
        check_identifier(self.origin_table)
        check_identifier(self.origin_column)
        _check_name(self.target_table, "Joined table")
        check_identifier(self.target_column)
        if not self.target_columns:
            raise ConfigurationError(f"Join to '{self.target_table}' projects no columns")
        for column in self.target_columns:
            check_identifier(column)
        if self.kind is not JoinKind.LEFT:
            raise ConfigurationError(f"Unsupported join kind: {self.kind}")

    @property
    def on(self) -> tuple[str, str]:
        return (
            f"{self.origin_table}.{self.origin_column}",
            f"{self.target_table}.{self.target_column}",
        )

    @property
    def projection(self) -> list[str]:
        return [
            f"{self.target_table}.{column} AS {joined_alias(self.target_table, column)}"
            for column in self.target_columns
        ]


@dataclass(frozen=True)
class EntityPlan(Generic[T]):
    """Compiled, validated description of one entity's storage."""

    table: str
    columns: tuple[str, ...]
    factory: EntityFactory[T]
    joins: tuple[Join, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.table:
            raise ConfigurationError("Entity plan has no table")
        _check_name(self.table, "Table")
        if not self.columns:
            raise ConfigurationError(f"Entity plan for '{self.table}' declares no columns")
        if len(set(self.columns)) != len(self.columns):
            raise ConfigurationError(f"Duplicate columns declared for '{self.table}'")
        for column in self.columns:
            _check_name(column, "Column")
            if column == "id":
                raise ConfigurationError(f"'id' is implicit and must not be declared on '{self.table}'")
        if not callable(self.factory):
            raise ConfigurationError(f"Entity plan for '{self.table}' has no factory")

        # Each join starts from the entity's table or a table joined before it
        reachable = {self.table}
        for join in self.joins:
            if join.target_table in reachable:
                raise ConfigurationError(
                    f"'{join.target_table}' is joined more than once in plan for '{self.table}'"
                )
            if join.origin_table not in reachable:
                raise ConfigurationError(
                    f"Join to '{join.target_table}' starts from unknown table '{join.origin_table}'"
                )
            reachable.add(join.target_table)

    @property
    def own_columns(self) -> tuple[str, ...]:
        """Declared columns plus the primary key."""
        return ("id", *self.columns)

    @property
    def projection(self) -> list[str]:
        """Own columns qualified, then every join's aliased columns in order."""
        own = [f"{self.table}.{column}" for column in self.own_columns]
        for join in self.joins:
            own.extend(join.projection)
        return own
