"""Field-name conventions between application code and storage columns.

Storage columns are snake_case. Application-facing keys follow whatever the
convention says; the default is camelCase, matching the aliases of the models
in :mod:`daas_db.models`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from pydantic.alias_generators import to_camel, to_snake

from daas_db.core.exceptions import ConfigurationError


def _convert_keys(row: Mapping[str, Any], convert: Callable[[str], str]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in row.items():
        converted = convert(key)
        if converted in result:
            raise ConfigurationError(f"Keys collide after conversion: '{key}' -> '{converted}'")
        result[converted] = value
    return result


@dataclass(frozen=True)
class NamingConvention:
    """A pair of per-key transforms, one for each direction."""

    to_storage: Callable[[str], str]
    to_application: Callable[[str], str]

    def convert_to_storage(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return _convert_keys(row, self.to_storage)

    def convert_to_application(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return _convert_keys(row, self.to_application)


def _identity(name: str) -> str:
    return name


CAMEL_CASE = NamingConvention(to_storage=to_snake, to_application=to_camel)
IDENTITY = NamingConvention(to_storage=_identity, to_application=_identity)
