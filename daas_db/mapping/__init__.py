"""Mapping layer - turn flat joined rows into typed entities."""

from __future__ import annotations

from daas_db.mapping.builder import EntityMappingBuilder, entity
from daas_db.mapping.joined import (
    JoinedColumn,
    JoinedGroups,
    JoinedResult,
    Row,
    RowValue,
    extract_joined_groups,
    extract_own_columns,
    parse_joined_column,
    split_rows,
)
from daas_db.mapping.model import ModelFactory
from daas_db.mapping.naming import CAMEL_CASE, IDENTITY, NamingConvention
from daas_db.mapping.plan import EntityFactory, EntityPlan, Join

__all__ = [
    "entity",
    "EntityMappingBuilder",
    "EntityPlan",
    "EntityFactory",
    "Join",
    "ModelFactory",
    "NamingConvention",
    "CAMEL_CASE",
    "IDENTITY",
    "Row",
    "RowValue",
    "JoinedGroups",
    "JoinedColumn",
    "JoinedResult",
    "parse_joined_column",
    "extract_own_columns",
    "extract_joined_groups",
    "split_rows",
]
