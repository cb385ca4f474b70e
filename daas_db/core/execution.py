"""Helpers shared by engines and transactions.

Compiling statements for a driver, turning cursors into row dicts and
classifying driver failures all happen the same way whether a statement runs
on a pooled connection or inside a transaction.
"""

from __future__ import annotations

from typing import Any

import structlog

from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import ConstraintViolation, ExecutionError, StatementError
from daas_db.core.params import normalize_params
from daas_db.core.query import CompiledStatement, Statement

logger = structlog.get_logger()

INLINE_LABEL = "<inline>"


def compile_statement(
    statement: Statement | str,
    params: dict[str, Any] | None,
    backend: DatabaseBackend,
    paramstyle: str,
) -> CompiledStatement:
    """Compile *statement* for the driver.

    Plain strings are inline SQL written with ``:name`` placeholders and take
    their parameters from *params*; statement objects carry their own.
    """
    if isinstance(statement, str):
        compiled = CompiledStatement(statement, dict(params or {}), INLINE_LABEL)
    else:
        if params:
            raise ValueError("params are only accepted together with inline SQL")
        compiled = statement.compile(backend)
    return CompiledStatement(
        normalize_params(compiled.sql, paramstyle),
        compiled.params,
        compiled.label,
    )


def rows_to_dicts(description: Any, rows: list[Any]) -> list[dict[str, Any]]:
    """Convert fetched rows to dicts.

    Handles both tuple-like rows (sqlite3.Row) and dict rows (psycopg dict_row).
    """
    if description is None or not rows:
        return []
    if isinstance(rows[0], dict):
        return [dict(row) for row in rows]
    columns = [desc[0] for desc in description]
    return [dict(zip(columns, row, strict=True)) for row in rows]


def fetch_dicts(cursor: Any) -> list[dict[str, Any]]:
    if cursor.description is None:
        return []
    return rows_to_dicts(cursor.description, cursor.fetchall())


async def fetch_dicts_async(cursor: Any) -> list[dict[str, Any]]:
    if cursor.description is None:
        return []
    return rows_to_dicts(cursor.description, await cursor.fetchall())


def translate_error(error: Exception, adapter: Any, label: str) -> ExecutionError:
    """Map a driver exception onto the daas-db hierarchy."""
    if isinstance(error, adapter.integrity_errors):
        translated: ExecutionError = ConstraintViolation(label, str(error))
    else:
        translated = StatementError(label, str(error))
    logger.warning(
        "statement_failed",
        label=label,
        error_type=type(translated).__name__,
        detail=str(error),
    )
    return translated
