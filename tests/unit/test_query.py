"""Unit tests for statement composition."""

from __future__ import annotations

import pytest

from daas_db.core.enums import DatabaseBackend
from daas_db.core.exceptions import ConfigurationError
from daas_db.core.query import Delete, Insert, Select, Update, bind_value, check_identifier
from daas_db.mapping.plan import Join
from daas_db.models import BotStatus

SQLITE = DatabaseBackend.SQLITE
POSTGRES = DatabaseBackend.POSTGRESQL


class TestIdentifiers:
    def test_plain(self) -> None:
        assert check_identifier("lobby_id") == "lobby_id"

    def test_qualified_only_when_allowed(self) -> None:
        assert check_identifier("players.lobby_id", qualified=True) == "players.lobby_id"
        with pytest.raises(ConfigurationError):
            check_identifier("players.lobby_id")

    @pytest.mark.parametrize("name", ["", "1abc", "id; DROP TABLE bots", "a b", None])
    def test_rejected(self, name: object) -> None:
        with pytest.raises(ConfigurationError, match="Invalid SQL identifier"):
            check_identifier(name)

    def test_enum_bound_by_value(self) -> None:
        assert bind_value(BotStatus.IDLE) == "idle"
        assert bind_value(3) == 3


class TestSelect:
    def test_columns_and_where(self) -> None:
        compiled = Select(
            "bots", columns=["bots.id", "bots.username"], where={"bots.id": 5}
        ).compile(SQLITE)
        assert compiled.sql == "SELECT bots.id, bots.username FROM bots WHERE bots.id = :w0"
        assert compiled.params == {"w0": 5}
        assert compiled.label == "select:bots"

    def test_left_join(self) -> None:
        join = Join("lobbies", "id", "players", "lobby_id", ("id", "steam_id"))
        compiled = Select(
            "lobbies", columns=["lobbies.id", *join.projection], joins=[join]
        ).compile(SQLITE)
        assert compiled.sql == (
            "SELECT lobbies.id, players.id AS players__id, players.steam_id AS players__steam_id "
            "FROM lobbies LEFT JOIN players ON lobbies.id = players.lobby_id"
        )

    def test_null_condition(self) -> None:
        compiled = Select("bots", columns=["id"], where={"disabled_until": None}).compile(SQLITE)
        assert compiled.sql.endswith("WHERE disabled_until IS NULL")
        assert compiled.params == {}

    def test_multiple_conditions_joined_with_and(self) -> None:
        compiled = Select(
            "players", columns=["id"], where={"lobby_id": 1, "steam_id": "1234"}
        ).compile(SQLITE)
        assert compiled.sql.endswith("WHERE lobby_id = :w0 AND steam_id = :w1")
        assert compiled.params == {"w0": 1, "w1": "1234"}

    def test_limit_offset(self) -> None:
        compiled = Select("bots", columns=["id"], limit=10, offset=20).compile(POSTGRES)
        assert compiled.sql == "SELECT id FROM bots LIMIT :limit OFFSET :offset"
        assert compiled.params == {"limit": 10, "offset": 20}

    def test_offset_without_limit_on_sqlite(self) -> None:
        compiled = Select("bots", columns=["id"], offset=5).compile(SQLITE)
        assert compiled.sql == "SELECT id FROM bots LIMIT -1 OFFSET :offset"

    def test_offset_without_limit_on_postgres(self) -> None:
        compiled = Select("bots", columns=["id"], offset=5).compile(POSTGRES)
        assert compiled.sql == "SELECT id FROM bots OFFSET :offset"

    def test_zero_offset_omitted(self) -> None:
        assert Select("bots", columns=["id"]).compile(SQLITE).sql == "SELECT id FROM bots"

    def test_negative_limit(self) -> None:
        with pytest.raises(ValueError, match="limit"):
            Select("bots", columns=["id"], limit=-1).compile(SQLITE)

    def test_negative_offset(self) -> None:
        with pytest.raises(ValueError, match="offset"):
            Select("bots", columns=["id"], offset=-1).compile(SQLITE)

    def test_no_columns(self) -> None:
        with pytest.raises(ConfigurationError, match="no columns"):
            Select("bots", columns=[]).compile(SQLITE)

    def test_bad_projection(self) -> None:
        with pytest.raises(ConfigurationError, match="projected column"):
            Select("bots", columns=["id; --"]).compile(SQLITE)

    def test_bad_condition_column(self) -> None:
        with pytest.raises(ConfigurationError):
            Select("bots", columns=["id"], where={"1=1 OR id": 1}).compile(SQLITE)


class TestInsert:
    def test_values_and_returning(self) -> None:
        compiled = Insert(
            "bots", {"username": "hello", "status": BotStatus.OFFLINE}
        ).compile(SQLITE)
        assert compiled.sql == (
            "INSERT INTO bots (username, status) VALUES (:v0, :v1) RETURNING id"
        )
        assert compiled.params == {"v0": "hello", "v1": "offline"}
        assert compiled.label == "insert:bots"

    def test_default_values(self) -> None:
        compiled = Insert("config", {}, returning=()).compile(SQLITE)
        assert compiled.sql == "INSERT INTO config DEFAULT VALUES"

    def test_bad_column(self) -> None:
        with pytest.raises(ConfigurationError):
            Insert("bots", {"user name": "x"}).compile(SQLITE)


class TestUpdate:
    def test_set_where_returning(self) -> None:
        compiled = Update(
            "bots",
            {"status": BotStatus.IDLE},
            where={"id": 3},
            returning=("id", "status"),
        ).compile(SQLITE)
        assert compiled.sql == "UPDATE bots SET status = :s0 WHERE id = :w0 RETURNING id, status"
        assert compiled.params == {"s0": "idle", "w0": 3}

    def test_without_where(self) -> None:
        compiled = Update("config", {"league_id": 9}).compile(SQLITE)
        assert compiled.sql == "UPDATE config SET league_id = :s0"

    def test_no_values(self) -> None:
        with pytest.raises(ConfigurationError, match="sets no columns"):
            Update("bots", {}, where={"id": 1}).compile(SQLITE)


class TestDelete:
    def test_where(self) -> None:
        compiled = Delete("bots", where={"id": 3}).compile(SQLITE)
        assert compiled.sql == "DELETE FROM bots WHERE id = :w0"
        assert compiled.params == {"w0": 3}
        assert compiled.label == "delete:bots"
