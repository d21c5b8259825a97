"""
Item schema: one connection against a connector.

An item is created by the caller, then progresses server-side until it
reaches a terminal status. The client only ever observes it by re-fetching.

Status lifecycle:
- PENDING / UPDATING: connection attempt in progress
- WAITING_USER_INPUT: institution asked for MFA or other input (see `parameter`)
- UPDATED: finished successfully
- LOGIN_ERROR / OUTDATED / ERROR: finished with a failure, details in `error`
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .common import parse_datetime, parse_enum
from .connector import Connector


class ItemStatus(str, Enum):
    """Item status as reported by the API."""

    PENDING = "PENDING"
    UPDATING = "UPDATING"
    WAITING_USER_INPUT = "WAITING_USER_INPUT"
    UPDATED = "UPDATED"
    LOGIN_ERROR = "LOGIN_ERROR"
    OUTDATED = "OUTDATED"
    ERROR = "ERROR"


IN_PROGRESS_STATUSES = frozenset(
    {
        ItemStatus.PENDING,
        ItemStatus.UPDATING,
        ItemStatus.WAITING_USER_INPUT,
    }
)


class ExecutionErrorCode(str, Enum):
    """Machine-readable reasons a connection attempt failed."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_CREDENTIALS_MFA = "INVALID_CREDENTIALS_MFA"
    ACCOUNT_CREDENTIALS_RESET = "ACCOUNT_CREDENTIALS_RESET"
    ALREADY_LOGGED_IN = "ALREADY_LOGGED_IN"
    ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
    SITE_NOT_AVAILABLE = "SITE_NOT_AVAILABLE"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    ACCOUNT_NEEDS_ACTION = "ACCOUNT_NEEDS_ACTION"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    USER_AUTHORIZATION_PENDING = "USER_AUTHORIZATION_PENDING"
    USER_AUTHORIZATION_NOT_GRANTED = "USER_AUTHORIZATION_NOT_GRANTED"
    USER_INPUT_TIMEOUT = "USER_INPUT_TIMEOUT"


@dataclass
class ExecutionError:
    """Why a connection attempt did not succeed.

    `code` is kept as the raw string so codes added server-side survive;
    compare it against ExecutionErrorCode members directly (they are str).
    """

    code: str
    message: str = ""
    provider_message: str | None = None  # exact message from the institution
    metadata: dict[str, Any] = field(default_factory=dict)
    attributes: Any = None  # unstructured, institution specific

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutionError":
        return cls(
            code=data.get("code", ""),
            message=data.get("message", ""),
            provider_message=data.get("providerMessage"),
            metadata=data.get("metadata") or {},
            attributes=data.get("attributes"),
        )

    @property
    def known_code(self) -> ExecutionErrorCode | None:
        return parse_enum(ExecutionErrorCode, self.code)


@dataclass
class Item:
    """Item representation."""

    id: str
    status: ItemStatus | None
    connector: Connector | None = None
    execution_status: str | None = None
    error: ExecutionError | None = None
    parameter: dict[str, Any] | None = None  # pending user input request
    webhook_url: str | None = None
    client_user_id: str | None = None
    status_detail: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_updated_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Item":
        """Create from API response."""
        connector = data.get("connector")
        error = data.get("error")
        return cls(
            id=str(data["id"]),
            status=parse_enum(ItemStatus, data.get("status")),
            connector=Connector.from_dict(connector) if connector else None,
            execution_status=data.get("executionStatus"),
            error=ExecutionError.from_dict(error) if error else None,
            parameter=data.get("parameter"),
            webhook_url=data.get("webhookUrl"),
            client_user_id=data.get("clientUserId"),
            status_detail=data.get("statusDetail"),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
            last_updated_at=parse_datetime(data.get("lastUpdatedAt")),
        )

    def has_finished(self) -> bool:
        """True once the item reached a terminal status.

        A status this client does not know counts as terminal, so polling
        hands it back to the caller instead of waiting on it forever.
        """
        return self.status not in IN_PROGRESS_STATUSES

    def is_waiting_user_input(self) -> bool:
        return self.status == ItemStatus.WAITING_USER_INPUT
