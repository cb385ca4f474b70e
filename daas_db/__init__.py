"""daas-db - entity repositories over joined SQL rows."""

from __future__ import annotations

from daas_db.core.connection import (
    AsyncConnectionManager,
    ConnectionConfig,
    ConnectionManager,
)
from daas_db.core.engine import AsyncEngine, Engine
from daas_db.core.enums import DatabaseBackend, JoinKind
from daas_db.core.exceptions import (
    AdapterError,
    ColumnMismatchError,
    ConfigurationError,
    ConnectionError,  # noqa: A004
    ConstraintViolation,
    DaasDbError,
    EmptyResultError,
    ExecutionError,
    MappingError,
    MultipleRowsError,
    PoolError,
    RepositoryError,
    StaleEntityError,
    StatementError,
    TransactionError,
    TransactionStateError,
)
from daas_db.core.log import configure_logging
from daas_db.core.query import Delete, Insert, Select, Update
from daas_db.core.settings import DatabaseSettings
from daas_db.core.transaction import AsyncTransactionManager, TransactionManager
from daas_db.mapping import CAMEL_CASE, IDENTITY, EntityPlan, Join, ModelFactory, NamingConvention, entity
from daas_db.repository import AsyncRepository, Repository

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    "AsyncConnectionManager",
    "DatabaseSettings",
    "configure_logging",
    # Engine
    "Engine",
    "AsyncEngine",
    # Statements
    "Select",
    "Insert",
    "Update",
    "Delete",
    # Transaction
    "TransactionManager",
    "AsyncTransactionManager",
    # Mapping
    "entity",
    "EntityPlan",
    "Join",
    "ModelFactory",
    "NamingConvention",
    "CAMEL_CASE",
    "IDENTITY",
    # Repository
    "Repository",
    "AsyncRepository",
    # Enums
    "DatabaseBackend",
    "JoinKind",
    # Exceptions
    "DaasDbError",
    "ConfigurationError",
    "ExecutionError",
    "StatementError",
    "ConstraintViolation",
    "MultipleRowsError",
    "MappingError",
    "EmptyResultError",
    "ColumnMismatchError",
    "RepositoryError",
    "StaleEntityError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
