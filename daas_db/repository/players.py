"""Players, always seen through the lobby they belong to."""

from __future__ import annotations

from daas_db.mapping.builder import entity
from daas_db.mapping.plan import EntityPlan
from daas_db.models import CreatePlayerData, Player, UpdatePlayerData
from daas_db.repository.base import Executor, Repository

PLAYER_COLUMNS = ("lobby_id", "steam_id", "is_captain", "is_ready")

PLAYERS: EntityPlan[Player] = entity(Player, table="players").columns(*PLAYER_COLUMNS).build()


class PlayerRepository:
    """Players of one lobby.

    Every lookup is scoped to ``lobby_id`` and every insert is stamped with
    it; obtain one with :meth:`LobbyRepository.players_of`.
    """

    def __init__(self, db: Executor, lobby_id: int) -> None:
        self.entities = Repository(db, PLAYERS)
        self.lobby_id = lobby_id

    def _scoped(self, **condition: object) -> dict[str, object]:
        return {"players.lobby_id": self.lobby_id, **condition}

    def find_by_id(self, player_id: int) -> Player | None:
        return self.entities.find_by_condition(self._scoped(**{"players.id": player_id}))

    def find_by_steam_id(self, steam_id: str) -> Player | None:
        return self.entities.find_by_condition(self._scoped(**{"players.steam_id": steam_id}))

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[Player]:
        return self.entities.find_all_by_condition(self._scoped(), limit, offset)

    def insert(self, data: CreatePlayerData) -> Player:
        return self.entities.insert({**data.to_data(), "lobbyId": self.lobby_id})

    def update(self, player: Player, data: UpdatePlayerData) -> Player:
        return self.entities.update(player, data.to_data())

    def delete(self, player: Player) -> None:
        self.entities.delete(player)

    def commit(self) -> None:
        self.entities.commit()

    def rollback(self, error: BaseException | None = None) -> None:
        self.entities.rollback(error)
