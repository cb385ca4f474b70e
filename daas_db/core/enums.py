"""Backend and join enumerations."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class JoinKind(Enum):
    """Join kinds a plan may declare. Only outer left joins are supported."""

    LEFT = "LEFT JOIN"
