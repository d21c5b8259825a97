"""
Investment schema.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .common import parse_datetime, parse_enum, parse_float


class InvestmentType(str, Enum):
    """Investment kind, also usable as a list filter."""

    COE = "COE"
    EQUITY = "EQUITY"
    ETF = "ETF"
    FIXED_INCOME = "FIXED_INCOME"
    MUTUAL_FUND = "MUTUAL_FUND"
    SECURITY = "SECURITY"
    OTHER = "OTHER"


@dataclass
class Investment:
    """Investment representation. Belongs to one item."""

    id: str
    item_id: str
    name: str
    type: InvestmentType | None
    balance: float = 0.0
    code: str | None = None
    number: str | None = None
    owner: str | None = None
    subtype: str | None = None
    amount: float | None = None
    value: float | None = None
    quantity: float | None = None
    currency_code: str | None = None
    date: datetime | None = None
    due_date: datetime | None = None
    annual_rate: float | None = None
    last_month_rate: float | None = None
    last_twelve_months_rate: float | None = None
    issuer: str | None = None
    status: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Investment":
        """Create from API response."""
        return cls(
            id=str(data["id"]),
            item_id=str(data.get("itemId", "")),
            name=data.get("name", ""),
            type=parse_enum(InvestmentType, data.get("type")),
            balance=parse_float(data.get("balance")) or 0.0,
            code=data.get("code"),
            number=data.get("number"),
            owner=data.get("owner"),
            subtype=data.get("subtype"),
            amount=parse_float(data.get("amount")),
            value=parse_float(data.get("value")),
            quantity=parse_float(data.get("quantity")),
            currency_code=data.get("currencyCode"),
            date=parse_datetime(data.get("date")),
            due_date=parse_datetime(data.get("dueDate")),
            annual_rate=parse_float(data.get("annualRate")),
            last_month_rate=parse_float(data.get("lastMonthRate")),
            last_twelve_months_rate=parse_float(data.get("lastTwelveMonthsRate")),
            issuer=data.get("issuer"),
            status=data.get("status"),
        )
