"""Unit tests for ModelFactory."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel

from daas_db.core.exceptions import ColumnMismatchError
from daas_db.mapping.model import ModelFactory
from daas_db.models import Bot, BotStatus, Lobby, Player


@dataclass
class Tag:
    id: int
    label: str


@dataclass
class Post:
    id: int
    title: str
    tags: list = field(default_factory=list)


class Point:
    def __init__(self, x: int, y: int) -> None:
        self.x = x
        self.y = y


class Score(BaseModel):
    id: int
    value: float


class TestConstruction:
    def test_dataclass(self) -> None:
        post = ModelFactory(Post)({"id": 1, "title": "hello"})
        assert post == Post(id=1, title="hello")

    def test_plain_class(self) -> None:
        point = ModelFactory(Point)({"x": 1, "y": 2})
        assert (point.x, point.y) == (1, 2)

    def test_pydantic_model(self) -> None:
        score = ModelFactory(Score)({"id": 1, "value": "2.5"})
        assert score.value == 2.5

    def test_pydantic_aliases(self) -> None:
        bot = ModelFactory(Bot)({"id": 1, "username": "hello", "password": "pw", "sentryFile": "s"})
        assert bot.sentry_file == "s"
        assert bot.status is BotStatus.OFFLINE

    def test_missing_field_dataclass(self) -> None:
        with pytest.raises(ColumnMismatchError) as exc_info:
            ModelFactory(Post)({"id": 1})
        assert exc_info.value.target_class == "Post"

    def test_missing_field_pydantic(self) -> None:
        with pytest.raises(ColumnMismatchError) as exc_info:
            ModelFactory(Score)({"id": 1})
        assert exc_info.value.missing_fields == ["value"]


class TestRelations:
    def test_collection_in_row_order(self) -> None:
        factory = ModelFactory(Post, collections={"tags": ("tags", Tag)})
        post = factory(
            {"id": 1, "title": "hello"},
            {"tags": [{"id": 2, "label": "b"}, {"id": 1, "label": "a"}]},
        )
        assert post.tags == [Tag(2, "b"), Tag(1, "a")]

    def test_collection_without_groups_is_empty(self) -> None:
        factory = ModelFactory(Post, collections={"tags": ("tags", Tag)})
        assert factory({"id": 1, "title": "hello"}, {}).tags == []

    def test_reference_takes_first_group(self) -> None:
        factory = ModelFactory(
            Lobby,
            collections={"players": ("players", Player)},
            references={"bot": ("bots", Bot)},
        )
        bot_group = {"id": 7, "username": "hello", "password": "pw"}
        lobby = factory(
            {
                "id": 1,
                "name": "inhouse",
                "password": "secret",
                "server": "europe",
                "gameMode": "captains_mode",
                "botId": 7,
            },
            {
                "players": [
                    {"id": 10, "lobbyId": 1, "steamId": "1234"},
                    {"id": 11, "lobbyId": 1, "steamId": "4321"},
                ],
                "bots": [bot_group, bot_group],
            },
        )
        assert [p.steam_id for p in lobby.players] == ["1234", "4321"]
        assert lobby.bot is not None
        assert lobby.bot.username == "hello"

    def test_reference_without_groups_is_none(self) -> None:
        factory = ModelFactory(Post, references={"tags": ("tags", Tag)})
        assert factory({"id": 1, "title": "hello"}).tags is None

    def test_extra_overrides(self) -> None:
        factory = ModelFactory(Post)
        post = factory({"id": 1, "title": "hello"}, None, {"tags": [Tag(1, "a")]})
        assert post.tags == [Tag(1, "a")]

    def test_joined_tables(self) -> None:
        factory = ModelFactory(
            Lobby,
            collections={"players": ("players", Player)},
            references={"bot": ("bots", Bot)},
        )
        assert factory.joined_tables == {"players", "bots"}
        assert factory.target_class is Lobby
