"""Enumerations stored as text columns."""

from __future__ import annotations

from enum import Enum


class BotStatus(str, Enum):
    OFFLINE = "offline"
    IDLE = "idle"
    IN_LOBBY = "in_lobby"


class LobbyStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CONCLUDED = "concluded"


class GameMode(str, Enum):
    ALL_PICK = "all_pick"
    CAPTAINS_MODE = "captains_mode"
    CAPTAINS_DRAFT = "captains_draft"


class Server(str, Enum):
    US_EAST = "us_east"
    US_WEST = "us_west"
    EUROPE = "europe"
    SOUTH_AMERICA = "south_america"


class WebhookEventType(str, Enum):
    LOBBY_CREATED = "lobby_created"
    LOBBY_UPDATED = "lobby_updated"
    LOBBY_FINISHED = "lobby_finished"
