"""SQLite adapter - sync (sqlite3 stdlib) and async (aiosqlite).

Requires SQLite 3.35+ for ``RETURNING``. Foreign keys are switched on for
every pooled connection.
"""

from __future__ import annotations

import sqlite3
from datetime import date, datetime
from typing import Any

from daas_db.core.connection import ConnectionConfig
from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import ConnectionError, PoolError  # noqa: A004

# Python 3.12 deprecated the implicit datetime adapters
sqlite3.register_adapter(datetime, lambda value: value.isoformat(" "))
sqlite3.register_adapter(date, lambda value: value.isoformat())


class SqliteSyncAdapter:
    """Synchronous SQLite adapter using stdlib sqlite3."""

    @property
    def paramstyle(self) -> str:
        return "named"

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.SQLITE

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        return (sqlite3.IntegrityError,)

    def create_pool(self, config: ConnectionConfig) -> list[sqlite3.Connection]:
        """Create a 'pool' (list of connections) for SQLite."""
        pool: list[sqlite3.Connection] = []
        try:
            for _ in range(config.pool_size):
                conn = sqlite3.connect(config.database)
                pool.append(conn)
                conn.row_factory = sqlite3.Row
                conn.execute("PRAGMA foreign_keys=ON")
        except sqlite3.Error as e:
            self.close_pool(pool)
            raise ConnectionError(f"Cannot open SQLite database '{config.database}': {e}") from e
        return pool

    def acquire_connection(self, pool: list[sqlite3.Connection]) -> sqlite3.Connection:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(
        self, connection: sqlite3.Connection, pool: list[sqlite3.Connection]
    ) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[sqlite3.Connection]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: sqlite3.Connection,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> sqlite3.Cursor:
        return connection.execute(sql, params or {})


class SqliteAsyncAdapter:
    """Asynchronous SQLite adapter using aiosqlite."""

    @property
    def paramstyle(self) -> str:
        return "named"

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.SQLITE

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        # aiosqlite re-raises the stdlib exception types
        return (sqlite3.IntegrityError,)

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        import aiosqlite

        pool: list[Any] = []
        try:
            for _ in range(config.pool_size):
                conn = await aiosqlite.connect(config.database)
                pool.append(conn)
                conn.row_factory = aiosqlite.Row
                await conn.execute("PRAGMA foreign_keys=ON")
        except sqlite3.Error as e:
            await self.close_pool_async(pool)
            raise ConnectionError(f"Cannot open SQLite database '{config.database}': {e}") from e
        return pool

    async def acquire_connection_async(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    async def release_connection_async(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    async def close_pool_async(self, pool: list[Any]) -> None:
        for conn in pool:
            await conn.close()
        pool.clear()

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await connection.execute(sql, params or {})
