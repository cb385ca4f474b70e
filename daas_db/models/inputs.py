"""Input data accepted by the repositories.

``Create*`` models carry everything a new row needs; ``Update*`` models are
sparse: only the fields a caller actually sets end up in the patch. A field
listed in ``not_null_fields`` is dropped from the patch when it is None, because
its column cannot be cleared.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from daas_db.models.enums import BotStatus, GameMode, LobbyStatus, Server, WebhookEventType


class _Input(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    not_null_fields: ClassVar[frozenset[str]] = frozenset()

    def to_data(self) -> dict[str, Any]:
        """Application-style (camelCase) mapping of the fields that were set."""
        dropped = {name for name in self.not_null_fields if getattr(self, name) is None}
        return self.model_dump(by_alias=True, exclude_unset=True, exclude=dropped)


class CreateBotData(_Input):
    username: str
    password: str
    sentry_file: str | None = None

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UpdateBotData(_Input):
    not_null_fields = frozenset({"username", "password", "status"})

    username: str | None = None
    password: str | None = None
    sentry_file: str | None = None
    status: BotStatus | None = None
    disabled_until: datetime | None = None


class CreateLobbyData(_Input):
    name: str
    password: str
    server: Server
    game_mode: GameMode
    team_a_has_first_pick: bool = True
    status: LobbyStatus = LobbyStatus.OPEN
    bot_id: int | None = None

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UpdateLobbyData(_Input):
    not_null_fields = frozenset(
        {"name", "password", "server", "game_mode", "team_a_has_first_pick", "status"}
    )

    name: str | None = None
    password: str | None = None
    server: Server | None = None
    game_mode: GameMode | None = None
    team_a_has_first_pick: bool | None = None
    status: LobbyStatus | None = None
    bot_id: int | None = None


class CreatePlayerData(_Input):
    steam_id: str
    is_captain: bool = False
    is_ready: bool = False

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UpdatePlayerData(_Input):
    not_null_fields = frozenset({"is_captain", "is_ready"})

    is_captain: bool | None = None
    is_ready: bool | None = None


class CreateWebhookData(_Input):
    event_type: WebhookEventType
    url: str

    def to_data(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class UpdateWebhookData(_Input):
    not_null_fields = frozenset({"event_type", "url"})

    event_type: WebhookEventType | None = None
    url: str | None = None
    regenerate_secret: bool = False


class UpdateConfigData(_Input):
    league_id: int | None = None
