"""
Connector schema: an institution or integration exposed by the API.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .common import parse_datetime, parse_enum


class ConnectorType(str, Enum):
    """Kind of institution a connector talks to."""

    PERSONAL_BANK = "PERSONAL_BANK"
    BUSINESS_BANK = "BUSINESS_BANK"
    INVESTMENT = "INVESTMENT"
    TELECOMMUNICATION = "TELECOMMUNICATION"
    DIGITAL_ECONOMY = "DIGITAL_ECONOMY"
    PAYMENT_ACCOUNT = "PAYMENT_ACCOUNT"
    OTHER = "OTHER"


@dataclass
class ConnectorCredential:
    """One credential field a user must supply to connect."""

    name: str
    label: str = ""
    type: str | None = None  # text, password, number, select, image, ...
    placeholder: str | None = None
    validation: str | None = None  # regex
    validation_message: str | None = None
    optional: bool = False
    options: list[dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "ConnectorCredential":
        return cls(
            name=data.get("name", ""),
            label=data.get("label", ""),
            type=data.get("type"),
            placeholder=data.get("placeholder"),
            validation=data.get("validation"),
            validation_message=data.get("validationMessage"),
            optional=bool(data.get("optional", False)),
            options=data.get("options") or [],
        )


@dataclass
class Connector:
    """Connector representation."""

    id: int
    name: str
    institution_url: str | None = None
    image_url: str | None = None
    primary_color: str | None = None
    type: ConnectorType | None = None
    country: str | None = None
    credentials: list[ConnectorCredential] = field(default_factory=list)
    has_mfa: bool = False
    products: list[str] = field(default_factory=list)
    is_sandbox: bool = False
    is_open_finance: bool = False
    oauth: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Connector":
        """Create from API response."""
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            institution_url=data.get("institutionUrl"),
            image_url=data.get("imageUrl"),
            primary_color=data.get("primaryColor"),
            type=parse_enum(ConnectorType, data.get("type")),
            country=data.get("country"),
            credentials=[
                ConnectorCredential.from_dict(c) for c in data.get("credentials") or []
            ],
            has_mfa=bool(data.get("hasMFA", False)),
            products=data.get("products") or [],
            is_sandbox=bool(data.get("isSandbox", False)),
            is_open_finance=bool(data.get("isOpenFinance", False)),
            oauth=bool(data.get("oauth", False)),
            created_at=parse_datetime(data.get("createdAt")),
        )
