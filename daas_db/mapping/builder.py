"""Entity plan DSL builder.

Provides a fluent builder for declaring how an entity is stored::

    LOBBIES = (
        entity(Lobby, table="lobbies")
        .columns("name", "status", "bot_id")
        .left_join("players", on=("id", "lobby_id"), columns=("id", "steam_id"))
        .collection("players", Player, table="players")
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from daas_db.core.enums import JoinKind
from daas_db.core.exceptions import ConfigurationError
from daas_db.mapping.model import ModelFactory
from daas_db.mapping.plan import EntityFactory, EntityPlan, Join

T = TypeVar("T")


def entity(target_class: type[T], table: str | None = None) -> EntityMappingBuilder[T]:
    """Entry point for the entity plan DSL.

    Args:
        target_class: The entity class the plan produces.
        table: Storage table. Defaults to the lowercase class name + "s".

    Returns:
        A builder for chaining declarations.
    """
    if table is None:
        table = target_class.__name__.lower() + "s"
    return EntityMappingBuilder(target_class, table)


class EntityMappingBuilder(Generic[T]):
    """Fluent builder for entity plans."""

    def __init__(self, target_class: type[T], table: str) -> None:
        self._target_class = target_class
        self._table = table
        self._columns: list[str] = []
        self._joins: list[Join] = []
        self._collections: dict[str, tuple[str, type[Any]]] = {}
        self._references: dict[str, tuple[str, type[Any]]] = {}
        self._factory: EntityFactory[T] | None = None

    def columns(self, *names: str) -> EntityMappingBuilder[T]:
        """Declare the table's own columns, ``id`` excluded."""
        self._columns.extend(names)
        return self

    def left_join(
        self,
        table: str,
        *,
        on: tuple[str, str],
        columns: Sequence[str],
        origin_table: str | None = None,
    ) -> EntityMappingBuilder[T]:
        """Declare ``LEFT JOIN table ON origin.on[0] = table.on[1]``.

        *origin_table* defaults to the entity's own table.
        """
        origin_column, target_column = on
        self._joins.append(
            Join(
                origin_table=origin_table or self._table,
                origin_column=origin_column,
                target_table=table,
                target_column=target_column,
                target_columns=tuple(columns),
                kind=JoinKind.LEFT,
            )
        )
        return self

    def collection(
        self, attribute: str, child_class: type[Any], *, table: str
    ) -> EntityMappingBuilder[T]:
        """Fill *attribute* with one *child_class* per row joined from *table*."""
        self._collections[attribute] = (table, child_class)
        return self

    def reference(
        self, attribute: str, ref_class: type[Any], *, table: str
    ) -> EntityMappingBuilder[T]:
        """Fill *attribute* with the first row joined from *table*, or None."""
        self._references[attribute] = (table, ref_class)
        return self

    def factory(self, factory: EntityFactory[T]) -> EntityMappingBuilder[T]:
        """Use a hand-written factory instead of a generated ModelFactory."""
        self._factory = factory
        return self

    def build(self) -> EntityPlan[T]:
        """Validate and compile the plan.

        Raises:
            ConfigurationError: On missing columns, bad identifiers, or
                relations pointing at tables that are not joined.
        """
        joined = {join.target_table for join in self._joins}
        relations = {**self._collections, **self._references}
        overlap = self._collections.keys() & self._references.keys()
        if overlap:
            raise ConfigurationError(
                f"Attributes declared as both collection and reference: {sorted(overlap)}"
            )
        for attribute, (table, _) in relations.items():
            if table not in joined:
                raise ConfigurationError(
                    f"'{attribute}' maps rows from '{table}', which is not joined "
                    f"by the plan for '{self._table}'"
                )

        if self._factory is not None:
            if relations:
                raise ConfigurationError(
                    "collection()/reference() only apply to the generated factory"
                )
            factory: EntityFactory[T] = self._factory
        else:
            factory = ModelFactory(
                self._target_class,
                collections=self._collections,
                references=self._references,
            )

        return EntityPlan(
            table=self._table,
            columns=tuple(self._columns),
            factory=factory,
            joins=tuple(self._joins),
        )
