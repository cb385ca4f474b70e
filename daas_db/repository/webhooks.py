"""Webhook subscriptions."""

from __future__ import annotations

import secrets
import string

from daas_db.mapping.builder import entity
from daas_db.mapping.plan import EntityPlan
from daas_db.models import CreateWebhookData, UpdateWebhookData, Webhook, WebhookEventType
from daas_db.repository.base import Executor, Repository

SECRET_ALPHABET = string.ascii_letters + string.digits
SECRET_LENGTH = 40

WEBHOOKS: EntityPlan[Webhook] = (
    entity(Webhook, table="webhooks").columns("event_type", "url", "secret").build()
)


def generate_secret(length: int = SECRET_LENGTH) -> str:
    """Random alphanumeric signing secret."""
    if length <= 0:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))


class WebhookRepository:
    def __init__(self, db: Executor) -> None:
        self.entities = Repository(db, WEBHOOKS)

    def find_by_id(self, webhook_id: int) -> Webhook | None:
        return self.entities.find_by_id(webhook_id)

    def find_all(self, limit: int | None = None, offset: int = 0) -> list[Webhook]:
        return self.entities.find_all(limit, offset)

    def find_all_by_event_type(self, event_type: WebhookEventType) -> list[Webhook]:
        return self.entities.find_all_by_condition({"webhooks.event_type": event_type})

    def insert(self, data: CreateWebhookData) -> Webhook:
        return self.entities.insert({**data.to_data(), "secret": generate_secret()})

    def update(self, webhook: Webhook, data: UpdateWebhookData) -> Webhook:
        patch = data.to_data()
        patch.pop("regenerateSecret", None)
        if data.regenerate_secret:
            patch["secret"] = generate_secret()
        return self.entities.update(webhook, patch)

    def delete(self, webhook: Webhook) -> None:
        self.entities.delete(webhook)

    def commit(self) -> None:
        self.entities.commit()

    def rollback(self, error: BaseException | None = None) -> None:
        self.entities.rollback(error)
