"""Statement execution engine.

The Engine is the explicitly constructed storage handle: build it once at
process start (``Engine.from_settings()`` or ``Engine.from_config()``), pass it
to the repositories that need it, and close it at shutdown. Every call runs on
a pooled connection and writes are committed before the connection goes back.
"""

from __future__ import annotations

from typing import Any

import structlog

from daas_db.core.connection import AsyncConnectionManager, ConnectionConfig, ConnectionManager
from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import MultipleRowsError
from daas_db.core.execution import (
    compile_statement,
    fetch_dicts,
    fetch_dicts_async,
    translate_error,
)
from daas_db.core.query import Statement
from daas_db.core.settings import DatabaseSettings
from daas_db.core.transaction import AsyncTransactionManager, TransactionManager

logger = structlog.get_logger()


class Engine:
    """Synchronous statement execution engine."""

    def __init__(self, connection_manager: ConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> Engine:
        return cls(ConnectionManager(config))

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None) -> Engine:
        """Create an Engine from ``DATABASE_URL`` and friends."""
        return cls.from_config(ConnectionConfig.from_settings(settings))

    @property
    def backend(self) -> DatabaseBackend:
        return self._adapter.backend

    def _run(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None,
        *,
        write: bool,
    ) -> tuple[list[dict[str, Any]], int, str]:
        compiled = compile_statement(statement, params, self.backend, self._adapter.paramstyle)

        with self._connection_manager.get_connection() as conn:
            try:
                cursor = self._adapter.execute(conn, compiled.sql, compiled.params)
                rows = fetch_dicts(cursor)
                rowcount = int(cursor.rowcount)
                if write:
                    conn.commit()
            except Exception as e:
                conn.rollback()
                raise translate_error(e, self._adapter, compiled.label) from e

        return rows, rowcount, compiled.label

    def fetch_one(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch a single row.

        Returns None if zero rows match.
        Raises MultipleRowsError if more than one row matches.
        """
        rows, _, label = self._run(statement, params, write=False)
        if not rows:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(label, len(rows))
        return rows[0]

    def fetch_all(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch all matching rows."""
        rows, _, _ = self._run(statement, params, write=False)
        return rows

    def fetch_scalar(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """First column of the first row, or None."""
        rows, _, _ = self._run(statement, params, write=False)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    def execute(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> int:
        """Execute a write statement. Returns affected row count."""
        _, rowcount, _ = self._run(statement, params, write=True)
        return rowcount

    def execute_returning(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Execute a write statement with a RETURNING clause and commit."""
        rows, _, _ = self._run(statement, params, write=True)
        return rows

    def transaction(self) -> TransactionManager:
        """Create a new transaction context manager."""
        return TransactionManager(self._connection_manager)

    def close(self) -> None:
        """Close the pool. The engine must not be used afterwards."""
        self._connection_manager.close_pool()
        logger.info("engine_closed", driver=self._connection_manager.config.driver)

    def __enter__(self) -> Engine:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


class AsyncEngine:
    """Asynchronous statement execution engine."""

    def __init__(self, connection_manager: AsyncConnectionManager) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> AsyncEngine:
        return cls(AsyncConnectionManager(config))

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None) -> AsyncEngine:
        return cls.from_config(ConnectionConfig.from_settings(settings))

    @property
    def backend(self) -> DatabaseBackend:
        return self._adapter.backend

    async def _run(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None,
        *,
        write: bool,
    ) -> tuple[list[dict[str, Any]], int, str]:
        compiled = compile_statement(statement, params, self.backend, self._adapter.paramstyle)

        async with self._connection_manager.get_connection() as conn:
            try:
                cursor = await self._adapter.execute_async(conn, compiled.sql, compiled.params)
                rows = await fetch_dicts_async(cursor)
                rowcount = int(cursor.rowcount)
                if write:
                    await conn.commit()
            except Exception as e:
                await conn.rollback()
                raise translate_error(e, self._adapter, compiled.label) from e

        return rows, rowcount, compiled.label

    async def fetch_one(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        rows, _, label = await self._run(statement, params, write=False)
        if not rows:
            return None
        if len(rows) > 1:
            raise MultipleRowsError(label, len(rows))
        return rows[0]

    async def fetch_all(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _, _ = await self._run(statement, params, write=False)
        return rows

    async def fetch_scalar(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        rows, _, _ = await self._run(statement, params, write=False)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    async def execute(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> int:
        _, rowcount, _ = await self._run(statement, params, write=True)
        return rowcount

    async def execute_returning(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _, _ = await self._run(statement, params, write=True)
        return rows

    def transaction(self) -> AsyncTransactionManager:
        """Create a new async transaction context manager.

        The connection is acquired in ``__aenter__``, allowing usage as
        ``async with engine.transaction() as tx:``.
        """
        return AsyncTransactionManager(self._connection_manager)

    async def close(self) -> None:
        await self._connection_manager.close_pool()
        logger.info("engine_closed", driver=self._connection_manager.config.driver)

    async def __aenter__(self) -> AsyncEngine:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
