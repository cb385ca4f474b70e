"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator

import pytest

from daas_db.core.connection import ConnectionConfig
from daas_db.core.engine import AsyncEngine, Engine

SCHEMA = (
    """
    CREATE TABLE bots (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL,
        sentry_file TEXT,
        status TEXT NOT NULL DEFAULT 'offline',
        disabled_until TIMESTAMP
    )
    """,
    """
    CREATE TABLE lobbies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        password TEXT NOT NULL,
        server TEXT NOT NULL,
        game_mode TEXT NOT NULL,
        team_a_has_first_pick BOOLEAN NOT NULL DEFAULT 1,
        status TEXT NOT NULL DEFAULT 'open',
        bot_id INTEGER REFERENCES bots(id) ON DELETE SET NULL
    )
    """,
    """
    CREATE TABLE players (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        lobby_id INTEGER NOT NULL REFERENCES lobbies(id) ON DELETE CASCADE,
        steam_id TEXT NOT NULL,
        is_captain BOOLEAN NOT NULL DEFAULT 0,
        is_ready BOOLEAN NOT NULL DEFAULT 0,
        UNIQUE (lobby_id, steam_id)
    )
    """,
    """
    CREATE TABLE webhooks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        event_type TEXT NOT NULL,
        url TEXT NOT NULL,
        secret TEXT NOT NULL
    )
    """,
    "CREATE TABLE config (league_id INTEGER)",
)


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config.

    One connection only: every in-memory connection is a separate database.
    """
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def engine(sqlite_config: ConnectionConfig) -> Iterator[Engine]:
    """Engine over an in-memory database with the league schema."""
    eng = Engine.from_config(sqlite_config)
    for ddl in SCHEMA:
        eng.execute(ddl)
    yield eng
    eng.close()


@pytest.fixture
async def async_engine(sqlite_config: ConnectionConfig) -> AsyncIterator[AsyncEngine]:
    """Async engine (aiosqlite) over the same schema."""
    eng = AsyncEngine.from_config(sqlite_config)
    for ddl in SCHEMA:
        await eng.execute(ddl)
    yield eng
    await eng.close()
