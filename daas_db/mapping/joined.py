"""Joined result set reconstruction.

A query over an entity and its LEFT JOINed tables returns one flat row per
joined match. Own columns are plain names; joined columns are aliased
``<table>__<column>``. These functions split such rows back into the entity's
own values and, per joined table, the list of related rows.

A LEFT JOIN without a match still yields one row, with every column of the
joined table NULL. Such all-NULL groups are dropped, and a table whose groups
are all dropped does not appear in the result at all.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date, datetime
from typing import NamedTuple, TypeAlias

from daas_db.core.exceptions import EmptyResultError

RowValue: TypeAlias = str | int | float | bool | datetime | date | None
Row: TypeAlias = dict[str, RowValue]
JoinedGroups: TypeAlias = dict[str, list[Row]]

# Lazy table part: the first "__" with something before it is the boundary
_JOINED_COLUMN = re.compile(r"^(.+?)__(.+)$", re.DOTALL)


class JoinedColumn(NamedTuple):
    table: str
    column: str


class JoinedResult(NamedTuple):
    own: Row
    joined: JoinedGroups


def joined_alias(table: str, column: str) -> str:
    """Alias under which a joined table's column is projected."""
    return f"{table}__{column}"


def parse_joined_column(name: str) -> JoinedColumn | None:
    """Split ``table__column`` into its parts, or return None for own columns."""
    match = _JOINED_COLUMN.match(name)
    if match is None:
        return None
    return JoinedColumn(match.group(1), match.group(2))


def extract_own_columns(rows: Sequence[Row]) -> Row:
    """Own-column values of the entity, taken from the first row.

    Every row of one entity carries identical own values, so the first row is
    enough.

    Raises:
        EmptyResultError: If *rows* is empty.
    """
    if not rows:
        raise EmptyResultError()
    first = rows[0]
    return {key: value for key, value in first.items() if parse_joined_column(key) is None}


def extract_joined_groups(rows: Sequence[Row]) -> JoinedGroups:
    """Group joined columns per table, in row order, without all-NULL groups.

    Identical groups coming from different rows are kept; no deduplication
    happens beyond the all-NULL filter.
    """
    result: JoinedGroups = {}

    for row in rows:
        candidates: dict[str, Row] = {}
        for key, value in row.items():
            parsed = parse_joined_column(key)
            if parsed is None:
                continue
            candidates.setdefault(parsed.table, {})[parsed.column] = value

        for table, group in candidates.items():
            if all(value is None for value in group.values()):
                continue
            result.setdefault(table, []).append(group)

    return result


def split_rows(rows: Sequence[Row]) -> JoinedResult:
    """Own columns and joined groups of one entity's flat rows."""
    return JoinedResult(extract_own_columns(rows), extract_joined_groups(rows))
