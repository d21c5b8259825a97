"""
Tests for execute_and_wait.

Sleeping is patched out; the number of sleeps and status fetches is what
these tests assert on.
"""

import threading
from unittest.mock import MagicMock, patch

import pytest
import responses

from fixtures import BASE_URL, ITEM_ID, item_payload, validation_error_payload
from pluggy_sdk.pluggy_client import (
    PluggyAPIError,
    PollingCancelledError,
    PollingTimeoutError,
    PluggyValidationError,
)
from pluggy_sdk.schemas import ExecutionErrorCode, ItemParameters, ItemStatus

ITEM_URL = f"{BASE_URL}/items/{ITEM_ID}"

PARAMS = ItemParameters(connector_id=201, parameters={"user": "user-ok", "password": "password-ok"})


def status_fetches(rsps: responses.RequestsMock) -> int:
    return sum(1 for c in rsps.calls if c.request.method == "GET" and c.request.url == ITEM_URL)


@pytest.fixture
def sleep():
    with patch("pluggy_sdk.pluggy_client.client.time.sleep") as mocked:
        yield mocked


class TestExecuteAndWait:
    """Test waiting for a connection attempt to finish."""

    def test_polls_until_updated(self, mocked_responses, client, sleep):
        """Test that every status check is preceded by exactly one wait."""
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("PENDING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("PENDING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATED"))

        item = client.execute_and_wait(PARAMS, poll_interval=3.0)

        assert item.status == ItemStatus.UPDATED
        assert status_fetches(mocked_responses) == 3
        assert sleep.call_count == 3
        sleep.assert_called_with(3.0)

    def test_default_poll_interval_from_client(self, mocked_responses, client, sleep):
        client.poll_interval = 1.5
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("PENDING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATED"))

        client.execute_and_wait(PARAMS)

        sleep.assert_called_once_with(1.5)

    def test_login_error_is_returned_not_raised(self, mocked_responses, client, sleep):
        """Test that a failed login is a normal terminal result."""
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(
            responses.GET,
            ITEM_URL,
            json=item_payload(
                "LOGIN_ERROR",
                executionStatus="INVALID_CREDENTIALS",
                error={
                    "code": "INVALID_CREDENTIALS",
                    "message": "Invalid credentials",
                    "providerMessage": "Usuário ou senha inválidos",
                },
            ),
        )

        item = client.execute_and_wait(PARAMS)

        assert item.status == ItemStatus.LOGIN_ERROR
        assert item.has_finished()
        assert item.error.code == ExecutionErrorCode.INVALID_CREDENTIALS
        assert item.error.provider_message == "Usuário ou senha inválidos"
        assert status_fetches(mocked_responses) == 1
        assert sleep.call_count == 1

    @pytest.mark.parametrize("status", ["OUTDATED", "ERROR"])
    def test_failure_statuses_are_terminal(self, mocked_responses, client, sleep, status):
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload(status))

        item = client.execute_and_wait(PARAMS)

        assert item.status == ItemStatus(status)
        assert status_fetches(mocked_responses) == 1

    def test_waiting_user_input_keeps_polling(self, mocked_responses, client, sleep):
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(
            responses.GET,
            ITEM_URL,
            json=item_payload("WAITING_USER_INPUT", parameter={"name": "token"}),
        )
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATED"))

        item = client.execute_and_wait(PARAMS)

        assert item.status == ItemStatus.UPDATED
        assert status_fetches(mocked_responses) == 2

    def test_unknown_status_stops_polling(self, mocked_responses, client, sleep):
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("SOMETHING_NEW"))

        item = client.execute_and_wait(PARAMS)

        assert item.status is None
        assert status_fetches(mocked_responses) == 1

    def test_validation_error_on_create(self, mocked_responses, client, sleep):
        """Test that a rejected create never starts polling."""
        mocked_responses.add(
            responses.POST,
            f"{BASE_URL}/items",
            json=validation_error_payload(),
            status=400,
        )

        with pytest.raises(PluggyValidationError) as exc_info:
            client.execute_and_wait(PARAMS)

        assert [e.parameter for e in exc_info.value.errors] == ["user", "password"]
        assert status_fetches(mocked_responses) == 0
        sleep.assert_not_called()

    def test_fetch_error_propagates(self, mocked_responses, client, sleep):
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(
            responses.GET,
            ITEM_URL,
            json={"code": 500, "message": "Internal error"},
            status=500,
        )

        with pytest.raises(PluggyAPIError) as exc_info:
            client.execute_and_wait(PARAMS)

        assert exc_info.value.status_code == 500
        assert not isinstance(exc_info.value, PluggyValidationError)


class TestCancellation:
    """Test stopping the wait from outside."""

    def test_cancelled_before_first_check(self, mocked_responses, client):
        cancel = threading.Event()
        cancel.set()
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))

        with pytest.raises(PollingCancelledError) as exc_info:
            client.execute_and_wait(PARAMS, cancel_event=cancel)

        assert exc_info.value.item.id == ITEM_ID
        assert status_fetches(mocked_responses) == 0

    def test_cancelled_during_wait(self, mocked_responses, client):
        """Test that a cancel arriving mid-wait stops before the next fetch."""
        cancel = MagicMock(spec=threading.Event)
        cancel.is_set.return_value = False
        cancel.wait.return_value = True
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))

        with pytest.raises(PollingCancelledError):
            client.execute_and_wait(PARAMS, cancel_event=cancel, poll_interval=3.0)

        cancel.wait.assert_called_once_with(3.0)
        assert status_fetches(mocked_responses) == 0

    def test_cancel_event_used_for_waiting(self, mocked_responses, client, sleep):
        cancel = threading.Event()
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATED"))

        item = client.execute_and_wait(PARAMS, cancel_event=cancel, poll_interval=0)

        assert item.status == ItemStatus.UPDATED
        sleep.assert_not_called()

    def test_cancel_from_another_thread(self, mocked_responses, client):
        cancel = threading.Event()
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATING"))

        timer = threading.Timer(0.2, cancel.set)
        timer.start()
        try:
            with pytest.raises(PollingCancelledError) as exc_info:
                client.execute_and_wait(PARAMS, cancel_event=cancel, poll_interval=0.05)
        finally:
            timer.cancel()

        assert exc_info.value.item.status == ItemStatus.UPDATING


class TestTimeout:
    """Test the overall deadline."""

    def test_zero_timeout(self, mocked_responses, client, sleep):
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))

        with pytest.raises(PollingTimeoutError) as exc_info:
            client.execute_and_wait(PARAMS, timeout=0)

        assert exc_info.value.item.id == ITEM_ID
        assert exc_info.value.timeout == 0
        assert status_fetches(mocked_responses) == 0
        sleep.assert_not_called()

    def test_deadline_passes_while_polling(self, mocked_responses, client, sleep):
        """Test that the last wait is capped by the remaining time."""
        clock = iter([0.0, 1.0, 4.0, 6.0])
        mocked_responses.add(responses.POST, f"{BASE_URL}/items", json=item_payload("UPDATING"))
        mocked_responses.add(responses.GET, ITEM_URL, json=item_payload("UPDATING"))

        with patch(
            "pluggy_sdk.pluggy_client.client.time.monotonic",
            side_effect=lambda: next(clock, 100.0),
        ):
            with pytest.raises(PollingTimeoutError) as exc_info:
                client.execute_and_wait(PARAMS, timeout=5.0, poll_interval=3.0)

        assert [c.args[0] for c in sleep.call_args_list] == [3.0, 1.0]
        assert status_fetches(mocked_responses) == 2
        assert exc_info.value.item.status == ItemStatus.UPDATING
        assert "after 5.0s" in str(exc_info.value)
