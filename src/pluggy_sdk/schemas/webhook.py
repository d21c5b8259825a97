"""
Webhook schema.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .common import parse_datetime, parse_enum


class WebhookEvent(str, Enum):
    """Events a webhook can subscribe to."""

    ALL = "all"
    ITEM_CREATED = "item/created"
    ITEM_UPDATED = "item/updated"
    ITEM_ERROR = "item/error"
    ITEM_DELETED = "item/deleted"
    ITEM_WAITING_USER_INPUT = "item/waiting_user_input"
    ITEM_LOGIN_SUCCEEDED = "item/login_succeeded"
    CONNECTOR_STATUS_UPDATED = "connector/status_updated"
    TRANSACTIONS_DELETED = "transactions/deleted"


@dataclass
class Webhook:
    """Webhook representation."""

    id: str
    url: str
    event: WebhookEvent | None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Webhook":
        return cls(
            id=str(data["id"]),
            url=data.get("url", ""),
            event=parse_enum(WebhookEvent, data.get("event")),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )
