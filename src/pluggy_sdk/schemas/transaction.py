"""
Transaction schema.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .common import parse_datetime, parse_enum, parse_float


class TransactionType(str, Enum):
    """Direction of money movement."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass
class Transaction:
    """Transaction representation. Always belongs to exactly one account."""

    id: str
    account_id: str | None
    date: datetime | None
    description: str
    amount: float
    description_raw: str | None = None
    balance: float | None = None
    currency_code: str | None = None
    category: str | None = None
    category_id: str | None = None
    provider_code: str | None = None
    type: TransactionType | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Create from API response."""
        return cls(
            id=str(data["id"]),
            account_id=data.get("accountId"),
            date=parse_datetime(data.get("date")),
            description=data.get("description", ""),
            amount=parse_float(data.get("amount")) or 0.0,
            description_raw=data.get("descriptionRaw"),
            balance=parse_float(data.get("balance")),
            currency_code=data.get("currencyCode"),
            category=data.get("category"),
            category_id=data.get("categoryId"),
            provider_code=data.get("providerCode"),
            type=parse_enum(TransactionType, data.get("type")),
        )
