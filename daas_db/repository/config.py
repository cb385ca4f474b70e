"""The league-wide configuration row."""

from __future__ import annotations

from daas_db.core.query import Select, Update
from daas_db.mapping.naming import CAMEL_CASE, NamingConvention
from daas_db.models import Config, UpdateConfigData
from daas_db.repository.base import Executor

CONFIG_TABLE = "config"
CONFIG_COLUMNS = ("league_id",)


class ConfigRepository:
    """Reads and patches the single row of ``config``.

    The table holds at most one row, so updates carry no WHERE clause.
    """

    def __init__(self, db: Executor, naming: NamingConvention = CAMEL_CASE) -> None:
        self.db = db
        self.naming = naming

    def get(self) -> Config | None:
        rows = self.db.fetch_all(Select(CONFIG_TABLE, columns=CONFIG_COLUMNS, limit=1))
        if not rows:
            return None
        return Config.model_validate(self.naming.convert_to_application(rows[0]))

    def update(self, data: UpdateConfigData) -> None:
        patch = data.to_data()
        if not patch:
            return
        self.db.execute(Update(CONFIG_TABLE, self.naming.convert_to_storage(patch)))
