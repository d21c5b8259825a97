"""
Account schema.

Accounts belong to exactly one item. A BANK account carries `bank_data`, a
CREDIT account carries `credit_data`; the two are mutually exclusive.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .common import parse_datetime, parse_enum, parse_float
from .transaction import Transaction


class AccountType(str, Enum):
    """Account type filter and discriminator."""

    BANK = "BANK"
    CREDIT = "CREDIT"


class AccountSubtype(str, Enum):
    CHECKING_ACCOUNT = "CHECKING_ACCOUNT"
    SAVINGS_ACCOUNT = "SAVINGS_ACCOUNT"
    CREDIT_CARD = "CREDIT_CARD"


@dataclass
class BankAccount:
    """Bank-specific account data."""

    transfer_number: str | None = None
    closing_balance: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "BankAccount":
        return cls(
            transfer_number=data.get("transferNumber"),
            closing_balance=parse_float(data.get("closingBalance")),
        )


@dataclass
class CreditAccount:
    """Credit-card-specific account data."""

    level: str | None = None
    brand: str | None = None
    balance_close_date: datetime | None = None
    balance_due_date: datetime | None = None
    available_credit_limit: float | None = None
    credit_limit: float | None = None
    balance_foreign_currency: float | None = None
    minimum_payment: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CreditAccount":
        # Older payloads spell this key with a capital A
        available = data.get("availableCreditLimit", data.get("AvailableCreditLimit"))
        return cls(
            level=data.get("level"),
            brand=data.get("brand"),
            balance_close_date=parse_datetime(data.get("balanceCloseDate")),
            balance_due_date=parse_datetime(data.get("balanceDueDate")),
            available_credit_limit=parse_float(available),
            credit_limit=parse_float(data.get("creditLimit")),
            balance_foreign_currency=parse_float(data.get("balanceForeignCurrency")),
            minimum_payment=parse_float(data.get("minimumPayment")),
        )


@dataclass
class Account:
    """Account representation."""

    id: str
    item_id: str
    name: str
    type: AccountType | None
    balance: float = 0.0
    marketing_name: str | None = None
    number: str | None = None
    owner: str | None = None
    tax_number: str | None = None
    currency_code: str | None = None
    subtype: AccountSubtype | None = None
    bank_data: BankAccount | None = None
    credit_data: CreditAccount | None = None
    transactions: list[Transaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Account":
        """Create from API response."""
        account_type = parse_enum(AccountType, data.get("type", data.get("accountType")))
        subtype = data.get("subtype", data.get("accountSubtype"))
        bank_data = data.get("bankData")
        credit_data = data.get("creditData")

        return cls(
            id=str(data["id"]),
            item_id=str(data.get("itemId", "")),
            name=data.get("name", ""),
            type=account_type,
            balance=parse_float(data.get("balance")) or 0.0,
            marketing_name=data.get("marketingName"),
            number=data.get("number"),
            owner=data.get("owner"),
            tax_number=data.get("taxNumber"),
            currency_code=data.get("currencyCode"),
            subtype=parse_enum(AccountSubtype, subtype),
            bank_data=(
                BankAccount.from_dict(bank_data)
                if bank_data and account_type != AccountType.CREDIT
                else None
            ),
            credit_data=(
                CreditAccount.from_dict(credit_data)
                if credit_data and account_type != AccountType.BANK
                else None
            ),
            transactions=[Transaction.from_dict(t) for t in data.get("transactions") or []],
        )
