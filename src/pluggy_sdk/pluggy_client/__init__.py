"""
Pluggy API Client.

Provides:
- Connectors (GET /connectors)
- Items: create, update, delete, and create-then-wait for completion
- Accounts, transactions, investments and categories
- Webhook CRUD (/webhooks)

Validation failures on create/update calls raise PluggyValidationError with
the rejected fields; everything else raises the PluggyError family.
"""

from .client import PluggyClient
from .errors import (
    ApiErrorBody,
    PluggyAPIError,
    PluggyConnectionError,
    PluggyError,
    PluggyValidationError,
    PollingCancelledError,
    PollingTimeoutError,
    ValidationErrorDetail,
)
from .service import APIService

__all__ = [
    "PluggyClient",
    "APIService",
    "PluggyError",
    "PluggyAPIError",
    "PluggyConnectionError",
    "PluggyValidationError",
    "PollingCancelledError",
    "PollingTimeoutError",
    "ApiErrorBody",
    "ValidationErrorDetail",
]
