"""
Request parameter objects.

Each builds either a query mapping (`to_query`) or a JSON body (`to_body`).
Unset optional fields are left as None; `build_query` drops them before they
reach the wire.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .connector import ConnectorType


@dataclass
class ConnectorParameters:
    """Filters for listing connectors."""

    name: str | None = None
    countries: list[str] = field(default_factory=list)
    types: list[ConnectorType] = field(default_factory=list)
    include_sandbox: bool | None = None

    def to_query(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "countries": self.countries,
            "types": self.types,
            "sandbox": self.include_sandbox,
        }


@dataclass
class ItemParameters:
    """Body for creating or updating an item.

    Set `item_id` when updating an existing item.
    """

    connector_id: int | None = None
    parameters: dict[str, str] = field(default_factory=dict)  # connector credentials
    webhook_url: str | None = None
    client_user_id: str | None = None
    item_id: str | None = None

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}

        optional_fields = [
            ("id", self.item_id),
            ("connectorId", self.connector_id),
            ("webhookUrl", self.webhook_url),
            ("clientUserId", self.client_user_id),
        ]
        for key, value in optional_fields:
            if value is not None:
                body[key] = value

        if self.parameters:
            body["parameters"] = dict(self.parameters)

        return body


@dataclass
class TransactionParameters:
    """Date range and pagination for listing transactions."""

    date_from: date | None = None
    date_to: date | None = None
    page_size: int | None = None
    page: int | None = None

    def to_query(self) -> dict[str, Any]:
        return {
            "from": self.date_from,
            "to": self.date_to,
            "pageSize": self.page_size,
            "page": self.page,
        }
