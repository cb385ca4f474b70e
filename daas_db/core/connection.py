"""Connection configuration and management.

ConnectionConfig is a Pydantic model for type-safe connection config. It can
be built directly, from a database URL, or from :class:`DatabaseSettings`.
ConnectionManager and AsyncConnectionManager use adapter protocols for
pool-based connection lifecycle.
"""

from __future__ import annotations

import importlib
from contextlib import asynccontextmanager, contextmanager
from typing import Any
from urllib.parse import parse_qsl, unquote, urlsplit

from pydantic import BaseModel, model_validator

from daas_db.core.exceptions import AdapterError, ConfigurationError
from daas_db.core.settings import DatabaseSettings

_URL_SCHEMES: dict[str, str] = {
    "sqlite": "sqlite",
    "postgresql": "postgresql",
    "postgres": "postgresql",
}


class ConnectionConfig(BaseModel):
    """Configuration for database connections."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    pool_size: int = 5
    extra: dict[str, Any] = {}

    @model_validator(mode="after")
    def single_memory_connection(self) -> ConnectionConfig:
        # Every SQLite in-memory connection is its own empty database
        if self.driver == "sqlite" and self.database == ":memory:":
            self.pool_size = 1
        return self

    @classmethod
    def from_url(cls, url: str, *, ssl: bool = False, pool_size: int = 5) -> ConnectionConfig:
        """Parse ``sqlite:///path`` or ``postgresql://user:pw@host:port/db``.

        ``ssl`` (or a ``?ssl=true`` query argument) requests ``sslmode=require``
        on PostgreSQL; SQLite ignores it.
        """
        parts = urlsplit(url)
        driver = _URL_SCHEMES.get(parts.scheme.lower())
        if driver is None:
            raise ConfigurationError(f"Unsupported database URL scheme: '{parts.scheme}'")

        extra: dict[str, Any] = dict(parse_qsl(parts.query))

        if driver == "sqlite":
            database = parts.path[1:] if parts.path.startswith("/") else parts.path
            if not database:
                raise ConfigurationError(f"SQLite URL has no database path: '{url}'")
            return cls(driver=driver, database=database, pool_size=pool_size)

        if extra.pop("ssl", "").lower() == "true":
            ssl = True
        if ssl:
            extra.setdefault("sslmode", "require")

        database = parts.path.lstrip("/")
        if not database:
            raise ConfigurationError(f"Database URL has no database name: '{url}'")

        return cls(
            driver=driver,
            host=parts.hostname,
            port=parts.port,
            user=unquote(parts.username) if parts.username else None,
            password=unquote(parts.password) if parts.password else None,
            database=database,
            pool_size=pool_size,
            extra=extra,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None) -> ConnectionConfig:
        """Build a config from ``DATABASE_URL`` / ``DATABASE_SSL``."""
        settings = settings or DatabaseSettings()
        if not settings.database_url:
            raise ConfigurationError(
                "Cannot connect to the db because the DATABASE_URL env var is not present"
            )
        return cls.from_url(
            settings.database_url,
            ssl=settings.database_ssl,
            pool_size=settings.database_pool_size,
        )


# Adapter module mapping: driver name -> (module_path, sync_class, async_class)
_ADAPTER_MAP: dict[str, tuple[str, str, str]] = {
    "sqlite": ("daas_db.adapters.sqlite", "SqliteSyncAdapter", "SqliteAsyncAdapter"),
    "postgresql": (
        "daas_db.adapters.postgresql",
        "PostgresqlSyncAdapter",
        "PostgresqlAsyncAdapter",
    ),
}


def _load_adapter(driver: str, kind: str) -> Any:
    """Load a sync or async adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, sync_cls_name, async_cls_name = _ADAPTER_MAP[driver_lower]
    cls_name = sync_cls_name if kind == "sync" else async_cls_name

    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load {kind} adapter for '{driver}': {e}") from e


class ConnectionManager:
    """Synchronous connection manager using SyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver, "sync")
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    def initialize_pool(self) -> Any:
        """Initialize the connection pool."""
        if self._pool is None:
            self._pool = self._adapter.create_pool(self.config)
        return self._pool

    def acquire(self) -> Any:
        """Take a connection out of the pool; the caller must :meth:`release` it."""
        pool = self.initialize_pool()
        return self._adapter.acquire_connection(pool)

    def release(self, connection: Any) -> None:
        if self._pool is not None:
            self._adapter.release_connection(connection, self._pool)

    @contextmanager
    def get_connection(self):  # type: ignore[no-untyped-def]
        """Get a connection from the pool as a context manager."""
        connection = self.acquire()
        try:
            yield connection
        finally:
            self.release(connection)

    def close_pool(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            self._adapter.close_pool(self._pool)
            self._pool = None


class AsyncConnectionManager:
    """Asynchronous connection manager using AsyncAdapter protocol."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.config = config
        self._adapter = _load_adapter(config.driver, "async")
        self._pool: Any = None

    @property
    def adapter(self) -> Any:
        return self._adapter

    async def initialize_pool(self) -> Any:
        """Initialize the async connection pool."""
        if self._pool is None:
            self._pool = await self._adapter.create_pool_async(self.config)
        return self._pool

    async def acquire(self) -> Any:
        pool = await self.initialize_pool()
        return await self._adapter.acquire_connection_async(pool)

    async def release(self, connection: Any) -> None:
        if self._pool is not None:
            await self._adapter.release_connection_async(connection, self._pool)

    @asynccontextmanager
    async def get_connection(self):  # type: ignore[no-untyped-def]
        """Get an async connection from the pool as an async context manager."""
        connection = await self.acquire()
        try:
            yield connection
        finally:
            await self.release(connection)

    async def close_pool(self) -> None:
        """Close the async connection pool."""
        if self._pool is not None:
            await self._adapter.close_pool_async(self._pool)
            self._pool = None
