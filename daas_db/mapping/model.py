"""Entity factories built from model classes.

Supports Pydantic models, dataclasses and plain classes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from daas_db.core.exceptions import ColumnMismatchError
from daas_db.mapping.joined import JoinedGroups, Row

T = TypeVar("T")


def _construct(target_class: type[Any], data: Mapping[str, Any]) -> Any:
    """Build *target_class* from *data*.

    Detection order:
    1. Pydantic BaseModel -> model_validate(data)
    2. dataclass or plain class -> target_class(**data)
    """
    if isinstance(target_class, type) and issubclass(target_class, BaseModel):
        try:
            return target_class.model_validate(dict(data))
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ColumnMismatchError(target_class.__name__, missing) from e

    try:
        return target_class(**data)
    except TypeError as e:
        raise ColumnMismatchError(target_class.__name__, [str(e)]) from e


class ModelFactory(Generic[T]):
    """Entity factory for a model class and its joined relations.

    Args:
        target_class: The class to construct from the own-column row.
        collections: attribute -> (joined table, child class); the attribute
            receives one child per joined group, in row order.
        references: attribute -> (joined table, class); the attribute
            receives the first joined group, or None when there is none.
    """

    def __init__(
        self,
        target_class: type[T],
        collections: Mapping[str, tuple[str, type[Any]]] | None = None,
        references: Mapping[str, tuple[str, type[Any]]] | None = None,
    ) -> None:
        self._target_class = target_class
        self._collections = dict(collections or {})
        self._references = dict(references or {})

    @property
    def target_class(self) -> type[T]:
        return self._target_class

    @property
    def joined_tables(self) -> set[str]:
        tables = {table for table, _ in self._collections.values()}
        tables.update(table for table, _ in self._references.values())
        return tables

    def __call__(
        self,
        row: Row,
        joins: JoinedGroups | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> T:
        joins = joins or {}
        data: dict[str, Any] = dict(row)

        for attribute, (table, child_class) in self._collections.items():
            data[attribute] = [_construct(child_class, group) for group in joins.get(table, [])]

        for attribute, (table, ref_class) in self._references.items():
            groups = joins.get(table)
            data[attribute] = _construct(ref_class, groups[0]) if groups else None

        if extra:
            data.update(extra)

        return _construct(self._target_class, data)  # type: ignore[no-any-return]
