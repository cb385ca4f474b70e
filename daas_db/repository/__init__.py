"""Repository layer - entity repositories over an engine or a transaction."""

from __future__ import annotations

from daas_db.repository.base import AsyncRepository, Entity, Repository
from daas_db.repository.bots import BOTS, BotRepository
from daas_db.repository.config import ConfigRepository
from daas_db.repository.lobbies import LOBBIES, LobbyRepository
from daas_db.repository.players import PLAYERS, PlayerRepository
from daas_db.repository.webhooks import WEBHOOKS, WebhookRepository, generate_secret

__all__ = [
    "Repository",
    "AsyncRepository",
    "Entity",
    "BotRepository",
    "LobbyRepository",
    "PlayerRepository",
    "WebhookRepository",
    "ConfigRepository",
    "BOTS",
    "LOBBIES",
    "PLAYERS",
    "WEBHOOKS",
    "generate_secret",
]
