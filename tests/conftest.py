"""Test fixtures and utilities."""

import pytest
import responses

from fixtures import ACCOUNT_ID, API_KEY, BASE_URL, CLIENT_ID, CLIENT_SECRET, ITEM_ID
from pluggy_sdk.pluggy_client import PluggyClient


@pytest.fixture
def mocked_responses():
    """requests mock with the credential exchange already registered."""
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        rsps.add(
            responses.POST,
            f"{BASE_URL}/auth",
            json={"apiKey": API_KEY},
            status=200,
        )
        yield rsps


@pytest.fixture
def client() -> PluggyClient:
    """Client pointed at the mocked API, polling without delay."""
    return PluggyClient(CLIENT_ID, CLIENT_SECRET, base_url=BASE_URL, poll_interval=0)


@pytest.fixture
def sample_connector() -> dict:
    """Sample connector API response."""
    return {
        "id": 201,
        "name": "Pluggy Bank",
        "institutionUrl": "https://pluggy.ai",
        "imageUrl": "https://cdn.pluggy.ai/assets/connector-icons/201.svg",
        "primaryColor": "ef294b",
        "type": "PERSONAL_BANK",
        "country": "BR",
        "credentials": [
            {
                "label": "User",
                "name": "user",
                "type": "text",
                "placeholder": "user-ok",
                "validation": "^user-.{2,50}$",
                "validationMessage": "O user deve começar com user-",
            },
            {
                "label": "Password",
                "name": "password",
                "type": "password",
                "placeholder": "password-ok",
                "optional": False,
            },
        ],
        "hasMFA": False,
        "products": ["ACCOUNTS", "TRANSACTIONS", "INVESTMENTS"],
        "isSandbox": True,
        "isOpenFinance": False,
        "oauth": False,
        "createdAt": "2020-09-07T00:08:06.588Z",
    }


@pytest.fixture
def sample_bank_account() -> dict:
    """Sample BANK account API response."""
    return {
        "id": ACCOUNT_ID,
        "itemId": ITEM_ID,
        "type": "BANK",
        "subtype": "CHECKING_ACCOUNT",
        "number": "0001/12345-0",
        "name": "Conta Corrente",
        "marketingName": "GOLD Conta Corrente",
        "balance": 120950.1,
        "owner": "John Doe",
        "taxNumber": "416.799.495-00",
        "currencyCode": "BRL",
        "bankData": {"transferNumber": "0001/12345-0", "closingBalance": 120950.1},
        "creditData": None,
    }


@pytest.fixture
def sample_credit_account() -> dict:
    """Sample CREDIT account API response."""
    return {
        "id": "9c6e2c5a-1d3b-4f7e-8a9b-0c1d2e3f4a5b",
        "itemId": ITEM_ID,
        "type": "CREDIT",
        "subtype": "CREDIT_CARD",
        "number": "xxxx8670",
        "name": "Mastercard Black",
        "balance": -1500.25,
        "currencyCode": "BRL",
        "creditData": {
            "level": "BLACK",
            "brand": "MASTERCARD",
            "balanceCloseDate": "2024-12-03T00:00:00.000Z",
            "balanceDueDate": "2024-12-10T00:00:00.000Z",
            "availableCreditLimit": 8500.0,
            "creditLimit": 10000.0,
            "minimumPayment": 150.0,
        },
        "transactions": [
            {
                "id": "5d6b9f9a-06aa-491f-926a-15ba46c6366d",
                "accountId": "9c6e2c5a-1d3b-4f7e-8a9b-0c1d2e3f4a5b",
                "date": "2024-11-18T00:00:00.000Z",
                "description": "Uber",
                "amount": -23.5,
                "currencyCode": "BRL",
                "category": "Transport",
                "type": "DEBIT",
            }
        ],
    }


@pytest.fixture
def sample_transaction() -> dict:
    """Sample transaction API response."""
    return {
        "id": "5d6b9f9a-06aa-491f-926a-15ba46c6366d",
        "accountId": ACCOUNT_ID,
        "date": "2024-11-18T00:00:00.000Z",
        "description": "SPAR Einkauf",
        "descriptionRaw": "COMPRA CARTAO SPAR 18/11",
        "amount": -11.48,
        "balance": 120938.62,
        "currencyCode": "BRL",
        "category": "Groceries",
        "categoryId": "08010000",
        "providerCode": "123",
        "type": "DEBIT",
    }
