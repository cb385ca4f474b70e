"""Environment-driven settings using Pydantic Settings."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Settings read from the environment (and an optional ``.env`` file).

    ``DATABASE_URL`` has no default: a process that never sets it gets a
    :class:`~daas_db.core.exceptions.ConfigurationError` when it tries to
    build a connection config, not a silent fallback database.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str | None = None
    database_ssl: bool = False
    database_pool_size: int = 5

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"
