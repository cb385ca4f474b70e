"""Domain entities.

Attributes are snake_case in Python and camelCase on the application side
(``model_dump(by_alias=True)``), which is the key style the repositories hand
to these models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from daas_db.models.enums import BotStatus, GameMode, LobbyStatus, Server, WebhookEventType


class _Model(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Bot(_Model):
    id: int
    username: str
    password: str
    sentry_file: str | None = None
    status: BotStatus = BotStatus.OFFLINE
    disabled_until: datetime | None = None


class Player(_Model):
    id: int
    lobby_id: int
    steam_id: str
    is_captain: bool = False
    is_ready: bool = False


class Lobby(_Model):
    id: int
    name: str
    password: str
    server: Server
    game_mode: GameMode
    team_a_has_first_pick: bool = True
    status: LobbyStatus = LobbyStatus.OPEN
    bot_id: int | None = None
    players: list[Player] = Field(default_factory=list)
    bot: Bot | None = None


class Webhook(_Model):
    id: int
    event_type: WebhookEventType
    url: str
    secret: str


class Config(_Model):
    """The single row of the ``config`` table. Not an entity: it has no id."""

    league_id: int | None = None
