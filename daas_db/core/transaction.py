"""Transaction management.

Provides context managers for executing multiple statements atomically.
Auto-commits on success, auto-rolls-back on exception. A transaction exposes
the same read/write methods as the engine, so a repository can be bound to
either one.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

import structlog

from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import TransactionStateError
from daas_db.core.execution import (
    compile_statement,
    fetch_dicts,
    fetch_dicts_async,
    translate_error,
)
from daas_db.core.query import Statement

logger = structlog.get_logger()


class _TxState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class TransactionManager:
    """Synchronous transaction context manager.

    The connection is taken from the pool on ``__enter__`` and handed back on
    ``__exit__``.
    """

    def __init__(self, connection_manager: Any) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._connection: Any = None
        self._state = _TxState.IDLE

    @property
    def backend(self) -> DatabaseBackend:
        return self._adapter.backend

    @property
    def is_active(self) -> bool:
        return self._state == _TxState.ACTIVE

    def __enter__(self) -> TransactionManager:
        if self._state != _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        self._connection = self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                    logger.info("transaction_rolled_back", reason=exc_type.__name__)
                else:
                    self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            self._connection_manager.release(self._connection)

    def _run(self, statement: Statement | str, params: dict[str, Any] | None) -> tuple[list[dict[str, Any]], int]:
        self._check_active()
        compiled = compile_statement(statement, params, self.backend, self._adapter.paramstyle)
        try:
            cursor = self._adapter.execute(self._connection, compiled.sql, compiled.params)
            return fetch_dicts(cursor), int(cursor.rowcount)
        except Exception as e:
            raise translate_error(e, self._adapter, compiled.label) from e

    def execute(self, statement: Statement | str, params: dict[str, Any] | None = None) -> int:
        """Execute a write statement within this transaction."""
        _, rowcount = self._run(statement, params)
        return rowcount

    def execute_returning(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _ = self._run(statement, params)
        return rows

    def fetch_one(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """Fetch the first row within transaction context."""
        rows, _ = self._run(statement, params)
        if not rows:
            return None
        return rows[0]

    def fetch_all(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _ = self._run(statement, params)
        return rows

    def fetch_scalar(self, statement: Statement | str, params: dict[str, Any] | None = None) -> Any:
        rows, _ = self._run(statement, params)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    def commit(self) -> None:
        """Explicitly commit the transaction."""
        if self._state in (_TxState.IDLE, _TxState.ROLLED_BACK, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "commit")
        self._connection.commit()
        self._state = _TxState.COMMITTED

    def rollback(self) -> None:
        """Explicitly rollback the transaction."""
        if self._state in (_TxState.IDLE, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "rollback")
        self._connection.rollback()
        self._state = _TxState.ROLLED_BACK

    def _check_active(self) -> None:
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")


class AsyncTransactionManager:
    """Asynchronous transaction context manager."""

    def __init__(self, connection_manager: Any) -> None:
        self._connection_manager = connection_manager
        self._adapter = connection_manager.adapter
        self._connection: Any = None
        self._state = _TxState.IDLE

    @property
    def backend(self) -> DatabaseBackend:
        return self._adapter.backend

    @property
    def is_active(self) -> bool:
        return self._state == _TxState.ACTIVE

    async def __aenter__(self) -> AsyncTransactionManager:
        if self._state != _TxState.IDLE:
            raise TransactionStateError(self._state.value, "begin")
        self._connection = await self._connection_manager.acquire()
        self._state = _TxState.ACTIVE
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        try:
            if self._state == _TxState.ACTIVE:
                if exc_type is not None:
                    await self._connection.rollback()
                    self._state = _TxState.ROLLED_BACK
                    logger.info("transaction_rolled_back", reason=exc_type.__name__)
                else:
                    await self._connection.commit()
                    self._state = _TxState.COMMITTED
        finally:
            await self._connection_manager.release(self._connection)

    async def _run(
        self, statement: Statement | str, params: dict[str, Any] | None
    ) -> tuple[list[dict[str, Any]], int]:
        self._check_active()
        compiled = compile_statement(statement, params, self.backend, self._adapter.paramstyle)
        try:
            cursor = await self._adapter.execute_async(
                self._connection, compiled.sql, compiled.params
            )
            return await fetch_dicts_async(cursor), int(cursor.rowcount)
        except Exception as e:
            raise translate_error(e, self._adapter, compiled.label) from e

    async def execute(self, statement: Statement | str, params: dict[str, Any] | None = None) -> int:
        _, rowcount = await self._run(statement, params)
        return rowcount

    async def execute_returning(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _ = await self._run(statement, params)
        return rows

    async def fetch_one(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        rows, _ = await self._run(statement, params)
        if not rows:
            return None
        return rows[0]

    async def fetch_all(
        self,
        statement: Statement | str,
        params: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        rows, _ = await self._run(statement, params)
        return rows

    async def fetch_scalar(
        self, statement: Statement | str, params: dict[str, Any] | None = None
    ) -> Any:
        rows, _ = await self._run(statement, params)
        if not rows:
            return None
        return next(iter(rows[0].values()))

    async def commit(self) -> None:
        if self._state in (_TxState.IDLE, _TxState.ROLLED_BACK, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "commit")
        await self._connection.commit()
        self._state = _TxState.COMMITTED

    async def rollback(self) -> None:
        if self._state in (_TxState.IDLE, _TxState.COMMITTED):
            raise TransactionStateError(self._state.value, "rollback")
        await self._connection.rollback()
        self._state = _TxState.ROLLED_BACK

    def _check_active(self) -> None:
        if self._state != _TxState.ACTIVE:
            raise TransactionStateError(self._state.value, "execute")
