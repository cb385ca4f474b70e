"""Domain models - entities, their enums and repository input data."""

from __future__ import annotations

from daas_db.models.entities import Bot, Config, Lobby, Player, Webhook
from daas_db.models.enums import BotStatus, GameMode, LobbyStatus, Server, WebhookEventType
from daas_db.models.inputs import (
    CreateBotData,
    CreateLobbyData,
    CreatePlayerData,
    CreateWebhookData,
    UpdateBotData,
    UpdateConfigData,
    UpdateLobbyData,
    UpdatePlayerData,
    UpdateWebhookData,
)

__all__ = [
    "Bot",
    "Config",
    "Lobby",
    "Player",
    "Webhook",
    "BotStatus",
    "GameMode",
    "LobbyStatus",
    "Server",
    "WebhookEventType",
    "CreateBotData",
    "UpdateBotData",
    "CreateLobbyData",
    "UpdateLobbyData",
    "CreatePlayerData",
    "UpdatePlayerData",
    "CreateWebhookData",
    "UpdateWebhookData",
    "UpdateConfigData",
]
