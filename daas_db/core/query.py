"""Statement composition.

Small, dialect-aware builders for the four statements the repository layer
issues. Each compiles to SQL text with ``:name`` placeholders plus a params
dict; the engine rewrites placeholders for the driver.

Identifiers are never quoted, so every table and column name is checked
against a plain identifier pattern before it reaches SQL text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from daas_db.mapping.plan import Join

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"
_IDENTIFIER = re.compile(rf"^{_NAME}$")
_QUALIFIED = re.compile(rf"^{_NAME}(?:\.{_NAME})?$")
_PROJECTION = re.compile(rf"^{_NAME}(?:\.{_NAME})?(?: AS {_NAME})?$")


def check_identifier(name: Any, *, qualified: bool = False) -> str:
    """Return *name* if it is a safe SQL identifier, else raise ConfigurationError."""
    pattern = _QUALIFIED if qualified else _IDENTIFIER
    if not isinstance(name, str) or not pattern.match(name):
        raise ConfigurationError(f"Invalid SQL identifier: {name!r}")
    return name


def bind_value(value: Any) -> Any:
    """Convert a Python value into something every driver can bind."""
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class CompiledStatement:
    """SQL text, its parameters and a label used in errors and logs."""

    sql: str
    params: dict[str, Any]
    label: str


class Statement(Protocol):
    def compile(self, backend: DatabaseBackend) -> CompiledStatement: ...


def _where_clause(condition: Mapping[str, Any], params: dict[str, Any]) -> str:
    if not condition:
        return ""
    terms: list[str] = []
    for index, (column, value) in enumerate(condition.items()):
        check_identifier(column, qualified=True)
        if value is None:
            terms.append(f"{column} IS NULL")
            continue
        name = f"w{index}"
        params[name] = bind_value(value)
        terms.append(f"{column} = :{name}")
    return " WHERE " + " AND ".join(terms)


def _returning_clause(columns: Sequence[str]) -> str:
    if not columns:
        return ""
    return " RETURNING " + ", ".join(check_identifier(c) for c in columns)


@dataclass(frozen=True)
class Select:
    """``SELECT <columns> FROM <table> [LEFT JOIN ...] [WHERE ...] [LIMIT/OFFSET]``."""

    table: str
    columns: Sequence[str]
    joins: Sequence[Join] = ()
    where: Mapping[str, Any] = field(default_factory=dict)
    limit: int | None = None
    offset: int = 0

    def compile(self, backend: DatabaseBackend) -> CompiledStatement:
        check_identifier(self.table)
        if not self.columns:
            raise ConfigurationError(f"SELECT from '{self.table}' projects no columns")
        for column in self.columns:
            if not isinstance(column, str) or not _PROJECTION.match(column):
                raise ConfigurationError(f"Invalid projected column: {column!r}")
        if self.limit is not None and self.limit < 0:
            raise ValueError(f"limit must be >= 0, got {self.limit}")
        if self.offset < 0:
            raise ValueError(f"offset must be >= 0, got {self.offset}")

        params: dict[str, Any] = {}
        sql = f"SELECT {', '.join(self.columns)} FROM {self.table}"

        for join in self.joins:
            origin, target = join.on
            sql += f" {join.kind.value} {check_identifier(join.target_table)} ON {origin} = {target}"

        sql += _where_clause(self.where, params)

        if self.limit is not None:
            sql += " LIMIT :limit"
            params["limit"] = self.limit
        if self.offset:
            # SQLite only accepts OFFSET after a LIMIT
            if self.limit is None and backend is DatabaseBackend.SQLITE:
                sql += " LIMIT -1"
            sql += " OFFSET :offset"
            params["offset"] = self.offset

        return CompiledStatement(sql, params, f"select:{self.table}")


@dataclass(frozen=True)
class Insert:
    """``INSERT INTO <table> (...) VALUES (...) [RETURNING ...]``."""

    table: str
    values: Mapping[str, Any]
    returning: Sequence[str] = ("id",)

    def compile(self, backend: DatabaseBackend) -> CompiledStatement:
        check_identifier(self.table)
        params: dict[str, Any] = {}
        if self.values:
            columns: list[str] = []
            placeholders: list[str] = []
            for index, (column, value) in enumerate(self.values.items()):
                columns.append(check_identifier(column))
                placeholders.append(f":v{index}")
                params[f"v{index}"] = bind_value(value)
            sql = (
                f"INSERT INTO {self.table} ({', '.join(columns)}) "
                f"VALUES ({', '.join(placeholders)})"
            )
        else:
            sql = f"INSERT INTO {self.table} DEFAULT VALUES"
        sql += _returning_clause(self.returning)
        return CompiledStatement(sql, params, f"insert:{self.table}")


@dataclass(frozen=True)
class Update:
    """``UPDATE <table> SET ... [WHERE ...] [RETURNING ...]``.

    An empty *where* updates every row of the table.
    """

    table: str
    values: Mapping[str, Any]
    where: Mapping[str, Any] = field(default_factory=dict)
    returning: Sequence[str] = ()

    def compile(self, backend: DatabaseBackend) -> CompiledStatement:
        check_identifier(self.table)
        if not self.values:
            raise ConfigurationError(f"UPDATE of '{self.table}' sets no columns")
        params: dict[str, Any] = {}
        assignments: list[str] = []
        for index, (column, value) in enumerate(self.values.items()):
            assignments.append(f"{check_identifier(column)} = :s{index}")
            params[f"s{index}"] = bind_value(value)
        sql = f"UPDATE {self.table} SET {', '.join(assignments)}"
        sql += _where_clause(self.where, params)
        sql += _returning_clause(self.returning)
        return CompiledStatement(sql, params, f"update:{self.table}")


@dataclass(frozen=True)
class Delete:
    """``DELETE FROM <table> [WHERE ...]``."""

    table: str
    where: Mapping[str, Any] = field(default_factory=dict)

    def compile(self, backend: DatabaseBackend) -> CompiledStatement:
        check_identifier(self.table)
        params: dict[str, Any] = {}
        sql = f"DELETE FROM {self.table}" + _where_clause(self.where, params)
        return CompiledStatement(sql, params, f"delete:{self.table}")
