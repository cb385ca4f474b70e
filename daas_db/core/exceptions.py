"""daas-db exception hierarchy.

Driver exceptions are wrapped at the engine boundary and chained with
``raise ... from``; the repository layer propagates everything unchanged.
"""

from __future__ import annotations


class DaasDbError(Exception):
    """Base exception for all daas-db errors."""


# --- Configuration ---


class ConfigurationError(DaasDbError):
    """Raised when a plan, statement, URL or setting cannot be used as given."""


# --- Execution ---


class ExecutionError(DaasDbError):
    """Base for statement execution errors."""


class StatementError(ExecutionError):
    """Raised when the driver rejects or fails a statement."""

    def __init__(self, label: str, detail: str) -> None:
        self.label = label
        super().__init__(f"Statement '{label}' failed: {detail}")


class ConstraintViolation(ExecutionError):
    """Raised when a statement breaches a storage-level constraint."""

    def __init__(self, label: str, detail: str) -> None:
        self.label = label
        super().__init__(f"Constraint violated by '{label}': {detail}")


class MultipleRowsError(ExecutionError):
    """Raised when fetch_one encounters more than one row."""

    def __init__(self, label: str, row_count: int) -> None:
        self.label = label
        self.row_count = row_count
        super().__init__(f"fetch_one for '{label}' returned {row_count} rows (expected 0 or 1)")


# --- Mapping ---


class MappingError(DaasDbError):
    """Base for mapping errors."""


class EmptyResultError(MappingError):
    """Raised when own columns are requested from an empty result set."""

    def __init__(self) -> None:
        super().__init__("Cannot extract own columns from an empty result set")


class ColumnMismatchError(MappingError):
    """Raised when required fields cannot be mapped from row columns."""

    def __init__(self, target_class: str, missing_fields: list[str]) -> None:
        self.target_class = target_class
        self.missing_fields = missing_fields
        super().__init__(f"Cannot map to {target_class}: missing fields {missing_fields}")


# --- Repository ---


class RepositoryError(DaasDbError):
    """Base for repository errors."""


class StaleEntityError(RepositoryError):
    """Raised when an update targets a row that no longer exists."""

    def __init__(self, table: str, entity_id: object) -> None:
        self.table = table
        self.entity_id = entity_id
        super().__init__(f"No row with id {entity_id!r} in '{table}' to update")


# --- Transaction ---


class TransactionError(DaasDbError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(DaasDbError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
