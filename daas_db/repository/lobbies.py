"""Lobbies with their players and the bot hosting them."""

from __future__ import annotations

from typing import Any

from daas_db.mapping.builder import entity
from daas_db.mapping.plan import EntityPlan
from daas_db.models import Bot, CreateLobbyData, Lobby, Player, UpdateLobbyData
from daas_db.repository.base import Executor, Repository
from daas_db.repository.bots import BOT_COLUMNS
from daas_db.repository.players import PLAYER_COLUMNS, PlayerRepository

LOBBY_COLUMNS = (
    "name",
    "password",
    "server",
    "game_mode",
    "team_a_has_first_pick",
    "status",
    "bot_id",
)

LOBBIES: EntityPlan[Lobby] = (
    entity(Lobby, table="lobbies")
    .columns(*LOBBY_COLUMNS)
    .left_join("players", on=("id", "lobby_id"), columns=("id", *PLAYER_COLUMNS))
    .collection("players", Player, table="players")
    .left_join("bots", on=("bot_id", "id"), columns=("id", *BOT_COLUMNS))
    .reference("bot", Bot, table="bots")
    .build()
)


class LobbyRepository:
    """Lobbies; lookups by id or condition come back with ``players`` and ``bot`` filled in."""

    def __init__(self, db: Executor) -> None:
        self.entities = Repository(db, LOBBIES)

    def find_by_id(self, lobby_id: int) -> Lobby | None:
        return self.entities.find_by_id(lobby_id)

    def find_by_name(self, name: str) -> Lobby | None:
        return self.entities.find_by_condition({"lobbies.name": name})

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[Lobby]:
        """Own columns only: ``players`` is empty and ``bot`` is None on every result."""
        return self.entities.find_all(limit, offset)

    def insert(self, data: CreateLobbyData) -> Lobby:
        return self.entities.insert(data.to_data())

    def update(self, lobby: Lobby, data: UpdateLobbyData) -> Lobby:
        """Apply *data*, keeping the relations already loaded on *lobby*.

        The bot is kept only while ``bot_id`` still points at it.
        """
        patch = data.to_data()
        extra: dict[str, Any] = {"players": lobby.players}
        if "botId" not in patch or patch["botId"] == lobby.bot_id:
            extra["bot"] = lobby.bot
        return self.entities.update(lobby, patch, extra=extra)

    def delete(self, lobby: Lobby) -> None:
        self.entities.delete(lobby)

    def players_of(self, lobby: Lobby) -> PlayerRepository:
        """Player repository scoped to *lobby*, sharing this repository's executor."""
        return PlayerRepository(self.entities.db, lobby.id)

    def commit(self) -> None:
        self.entities.commit()

    def rollback(self, error: BaseException | None = None) -> None:
        self.entities.rollback(error)
