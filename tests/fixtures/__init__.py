"""
Shared API payloads and constants for the client tests.

Fixture functions in conftest.py wrap these; tests that need to vary a
payload (e.g. item status per poll) call the builders directly.
"""

BASE_URL = "http://pluggy.test"
CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
API_KEY = "test-api-key-12345"

ITEM_ID = "f5c9a0e1-7a2b-4c3d-9e8f-0a1b2c3d4e5f"
ACCOUNT_ID = "03cc0eff-4ec5-495c-adb3-1ef9611624fc"
WEBHOOK_ID = "2b1d7c3e-8f9a-4b5c-a6d7-e8f9a0b1c2d3"


def item_payload(status: str = "UPDATING", **overrides) -> dict:
    """Item API response with the given status."""
    data = {
        "id": ITEM_ID,
        "connector": {
            "id": 201,
            "name": "Pluggy Bank",
            "type": "PERSONAL_BANK",
            "country": "BR",
        },
        "status": status,
        "executionStatus": "LOGIN_IN_PROGRESS" if status == "UPDATING" else "SUCCESS",
        "createdAt": "2024-11-18T10:00:00.000Z",
        "updatedAt": "2024-11-18T10:00:05.000Z",
        "lastUpdatedAt": None,
        "webhookUrl": None,
        "error": None,
    }
    data.update(overrides)
    return data


def validation_error_payload() -> dict:
    """400 body listing rejected fields."""
    return {
        "code": 400,
        "message": "Invalid parameters",
        "errors": [
            {"parameter": "user", "message": "user is required", "code": "001"},
            {"parameter": "password", "message": "password is too short", "code": "002"},
        ],
    }
