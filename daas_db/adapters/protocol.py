"""Database adapter protocols.

An adapter is the storage-engine boundary: it owns the driver import, the
connection pool and the classification of driver integrity errors.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from daas_db.core.connection import ConnectionConfig
from daas_db.core.enums import DatabaseBackend


@runtime_checkable
class SyncAdapter(Protocol):
    """Synchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'named' (:name) or 'pyformat' (%(name)s)."""
        ...

    @property
    def backend(self) -> DatabaseBackend:
        """SQL dialect statements are compiled for."""
        ...

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        """Driver exception types meaning a constraint was violated."""
        ...

    def create_pool(self, config: ConnectionConfig) -> Any:
        """Create a connection pool."""
        ...

    def acquire_connection(self, pool: Any) -> Any:
        """Acquire a connection from the pool."""
        ...

    def release_connection(self, connection: Any, pool: Any) -> None:
        """Release a connection back to the pool."""
        ...

    def close_pool(self, pool: Any) -> None:
        """Close the pool and release all connections."""
        ...

    def execute(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL and return a cursor-like object."""
        ...


@runtime_checkable
class AsyncAdapter(Protocol):
    """Asynchronous database adapter protocol."""

    @property
    def paramstyle(self) -> str:
        ...

    @property
    def backend(self) -> DatabaseBackend:
        ...

    @property
    def integrity_errors(self) -> tuple[type[BaseException], ...]:
        ...

    async def create_pool_async(self, config: ConnectionConfig) -> Any:
        ...

    async def acquire_connection_async(self, pool: Any) -> Any:
        ...

    async def release_connection_async(self, connection: Any, pool: Any) -> None:
        ...

    async def close_pool_async(self, pool: Any) -> None:
        ...

    async def execute_async(
        self,
        connection: Any,
        sql: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Execute SQL asynchronously and return a cursor-like object."""
        ...
