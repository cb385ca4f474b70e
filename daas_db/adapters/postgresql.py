"""PostgreSQL adapter - sync and async using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from daas_db.core.connection import ConnectionConfig
from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import ConnectionError, PoolError  # noqa: A004


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    for key, value in sorted(config.extra.items()):
        parts.append(f"{key}={value}")
    return " ".join(parts)


def _integrity_errors() -> tuple[type[BaseException], ...]:
    import psycopg

    return (psycopg.IntegrityError,)


class PostgresqlSyncAdapter:
    """Synchronous PostgreSQL adapter using psycopg (v3+)."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.POSTGRESQL

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        return _integrity_errors()

    def create_pool(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        try:
            for _ in range(config.pool_size):
                pool.append(psycopg.connect(conninfo, row_factory=psycopg.rows.dict_row))
        except psycopg.OperationalError as e:
            self.close_pool(pool)
            raise ConnectionError(f"Cannot connect to PostgreSQL: {e}") from e
        return pool

    def acquire_connection(self, pool: list[Any]) -> Any:
        if not pool:
            raise PoolError("No connections available in pool")
        return pool.pop()

    def release_connection(self, connection: Any, pool: list[Any]) -> None:
        pool.append(connection)

    def close_pool(self, pool: list[Any]) -> None:
        for conn in pool:
            conn.close()
        pool.clear()

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return connection.execute(sql, params)


class PostgresqlAsyncAdapter:
    """Asynchronous PostgreSQL adapter using psycopg (v3+) async support."""

    @property
    def paramstyle(self) -> str:
        return "pyformat"

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.POSTGRESQL

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        return _integrity_errors()

    async def create_pool_async(self, config: ConnectionConfig) -> list[Any]:
        import psycopg
        import psycopg.rows

        conninfo = _build_conninfo(config)
        pool: list[Any] = []
        try:
            for _ in range(config.pool_size):
                conn = await psycopg.AsyncConnection.connect(
                    conninfo, row_factory=psycopg.rows.dict_row
                )
                pool.append(conn)
        except psycopg.OperationalError as e:
            await self.close_pool_async(pool)
            raise ConnectionError(f"Cannot connect to PostgreSQL: {e}") from e
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
        return await connection.execute(sql, params)
