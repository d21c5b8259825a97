"""
Typed models for the Pluggy API.

Every entity is a plain dataclass built from the API's JSON via `from_dict`.
Request parameter objects live alongside them.
"""

from .account import Account, AccountSubtype, AccountType, BankAccount, CreditAccount
from .category import Category
from .connector import Connector, ConnectorCredential, ConnectorType
from .investment import Investment, InvestmentType
from .item import (
    IN_PROGRESS_STATUSES,
    ExecutionError,
    ExecutionErrorCode,
    Item,
    ItemStatus,
)
from .page import PageResults
from .parameters import ConnectorParameters, ItemParameters, TransactionParameters
from .transaction import Transaction, TransactionType
from .webhook import Webhook, WebhookEvent

__all__ = [
    # Entities
    "Account",
    "BankAccount",
    "CreditAccount",
    "Category",
    "Connector",
    "ConnectorCredential",
    "ExecutionError",
    "Investment",
    "Item",
    "PageResults",
    "Transaction",
    "Webhook",
    # Enums
    "AccountSubtype",
    "AccountType",
    "ConnectorType",
    "ExecutionErrorCode",
    "InvestmentType",
    "ItemStatus",
    "TransactionType",
    "WebhookEvent",
    "IN_PROGRESS_STATUSES",
    # Parameters
    "ConnectorParameters",
    "ItemParameters",
    "TransactionParameters",
]
