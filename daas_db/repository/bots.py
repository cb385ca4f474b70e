"""Bot accounts."""

from __future__ import annotations

from daas_db.mapping.builder import entity
from daas_db.mapping.plan import EntityPlan
from daas_db.models import Bot, BotStatus, CreateBotData, UpdateBotData
from daas_db.repository.base import Executor, Repository

BOT_COLUMNS = ("username", "password", "sentry_file", "status", "disabled_until")

BOTS: EntityPlan[Bot] = entity(Bot, table="bots").columns(*BOT_COLUMNS).build()


class BotRepository:
    """Bots, one row each in ``bots``; usernames are unique."""

    def __init__(self, db: Executor) -> None:
        self.entities = Repository(db, BOTS)

    def find_by_id(self, bot_id: int) -> Bot | None:
        return self.entities.find_by_id(bot_id)

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[Bot]:
        return self.entities.find_all(limit, offset)

    def find_all_by_status(self, status: BotStatus) -> list[Bot]:
        return self.entities.find_all_by_condition({"bots.status": status})

    def insert(self, data: CreateBotData) -> Bot:
        """New bots start offline and enabled."""
        return self.entities.insert(
            {**data.to_data(), "status": BotStatus.OFFLINE, "disabledUntil": None}
        )

    def update(self, bot: Bot, data: UpdateBotData) -> Bot:
        return self.entities.update(bot, data.to_data())

    def delete(self, bot: Bot) -> None:
        self.entities.delete(bot)

    def commit(self) -> None:
        self.entities.commit()

    def rollback(self, error: BaseException | None = None) -> None:
        self.entities.rollback(error)
