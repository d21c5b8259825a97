"""
Pluggy API client implementation.
"""

import logging
import threading
import time
from typing import TYPE_CHECKING
from uuid import UUID

from ..schemas import (
    Account,
    AccountType,
    Category,
    Connector,
    ConnectorParameters,
    Investment,
    InvestmentType,
    Item,
    ItemParameters,
    PageResults,
    Transaction,
    TransactionParameters,
    Webhook,
    WebhookEvent,
)
from .errors import (
    PluggyError,
    PollingCancelledError,
    PollingTimeoutError,
    raises_validation_errors,
)
from .service import APIService

if TYPE_CHECKING:
    from ..config import PluggyConfig

logger = logging.getLogger(__name__)

ResourceId = str | UUID

URL_CONNECTORS = "/connectors"
URL_ITEMS = "/items"
URL_ACCOUNTS = "/accounts"
URL_TRANSACTIONS = "/transactions"
URL_INVESTMENTS = "/investments"
URL_CATEGORIES = "/categories"
URL_WEBHOOKS = "/webhooks"

# Seconds between item status checks in execute_and_wait
STATUS_POLL_INTERVAL = 3.0


class PluggyClient:
    """
    Client for the Pluggy API.

    Features:
    - Connectors, items, accounts, transactions, investments, categories
    - Webhook management
    - Create an item and wait for the connection to finish
    - Field-level validation errors on create/update calls

    Thread-safe: the only shared state is the cached API key.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = APIService.DEFAULT_BASE_URL,
        timeout: int = APIService.DEFAULT_TIMEOUT,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
        poll_interval: float = STATUS_POLL_INTERVAL,
    ):
        """
        Initialize Pluggy client.

        Args:
            client_id: Pluggy client id
            client_secret: Pluggy client secret
            base_url: API root
            timeout: Request timeout in seconds
            max_retries: Retry attempts for transient GET/DELETE failures
            backoff_factor: Backoff factor for retries
            poll_interval: Default seconds between status checks while waiting
                on an item
        """
        self.http = APIService(
            client_id=client_id,
            client_secret=client_secret,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
        )
        self.poll_interval = poll_interval

    @classmethod
    def from_config(cls, config: "PluggyConfig") -> "PluggyClient":
        """Build a client from the `pluggy` config section."""
        return cls(
            client_id=config.client_id,
            client_secret=config.client_secret,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            backoff_factor=config.backoff_factor,
            poll_interval=config.poll_interval,
        )

    def test_connection(self) -> bool:
        """Check that the credentials are accepted."""
        try:
            self.http.get_api_key()
            return True
        except PluggyError:
            return False

    def close(self) -> None:
        self.http.close()

    # -- connectors -----------------------------------------------------

    def fetch_connectors(
        self, params: ConnectorParameters | None = None
    ) -> PageResults[Connector]:
        """Fetch available connectors, optionally filtered."""
        return self.http.get(
            URL_CONNECTORS,
            query=params.to_query() if params else None,
            parse=PageResults.parser(Connector.from_dict),
        )

    def fetch_connector(self, connector_id: int) -> Connector:
        """Fetch a single connector."""
        return self.http.get(
            URL_CONNECTORS + "/{id}", segment=connector_id, parse=Connector.from_dict
        )

    # -- items ----------------------------------------------------------

    @raises_validation_errors
    def create_item(self, params: ItemParameters) -> Item:
        """
        Create an item, starting a connection attempt.

        The returned item is usually still in progress; poll it with
        fetch_item or use execute_and_wait.

        Raises:
            PluggyValidationError: If the API rejected request fields
            PluggyAPIError: For any other API error
        """
        item = self.http.post(URL_ITEMS, body=params.to_body(), parse=Item.from_dict)
        logger.info(f"Created item id={item.id} status={item.status}")
        return item

    @raises_validation_errors
    def execute_and_wait(
        self,
        params: ItemParameters,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
        poll_interval: float | None = None,
    ) -> Item:
        """
        Create an item and poll it until the connection attempt finishes.

        A failed login is not an exception: the returned item carries the
        terminal status and `error`.

        Args:
            params: Item parameters
            timeout: Maximum seconds to wait overall (None = no limit)
            cancel_event: Set it from another thread to stop waiting
            poll_interval: Seconds between status checks (default: client's)

        Returns:
            The item in its terminal status

        Raises:
            PluggyValidationError: If the API rejected request fields
            PollingTimeoutError: If the deadline passed first
            PollingCancelledError: If cancel_event was set
        """
        interval = self.poll_interval if poll_interval is None else poll_interval
        deadline = None if timeout is None else time.monotonic() + timeout

        item = self.create_item(params)

        while True:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(f"Polling for item {item.id} cancelled")
                raise PollingCancelledError(item)

            wait = interval
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(f"Item {item.id} not finished after {timeout}s")
                    raise PollingTimeoutError(item, timeout)
                wait = min(interval, remaining)

            self._wait(wait, cancel_event, item)

            item = self.fetch_item(item.id)
            logger.debug(f"Item {item.id} status={item.status} ({item.execution_status})")

            if item.has_finished():
                logger.info(f"Item {item.id} finished with status={item.status}")
                return item

    @staticmethod
    def _wait(seconds: float, cancel_event: threading.Event | None, item: Item) -> None:
        """Sleep between polls; a set cancel_event cuts the sleep short."""
        if cancel_event is None:
            time.sleep(seconds)
        elif cancel_event.wait(seconds):
            logger.info(f"Polling for item {item.id} cancelled")
            raise PollingCancelledError(item)

    def fetch_item(self, item_id: ResourceId) -> Item:
        """Fetch a single item."""
        return self.http.get(URL_ITEMS + "/{id}", segment=item_id, parse=Item.from_dict)

    @raises_validation_errors
    def update_item(self, params: ItemParameters) -> Item:
        """
        Update an item (e.g. refresh credentials or webhook url).

        Raises:
            PluggyValidationError: If the API rejected request fields
        """
        item = self.http.patch(URL_ITEMS, body=params.to_body(), parse=Item.from_dict)
        logger.info(f"Updated item id={item.id}")
        return item

    def delete_item(self, item_id: ResourceId) -> None:
        """Delete an item."""
        self.http.delete(URL_ITEMS + "/{id}", segment=item_id)
        logger.info(f"Deleted item id={item_id}")

    # -- accounts -------------------------------------------------------

    def fetch_accounts(
        self, item_id: ResourceId, account_type: AccountType | None = None
    ) -> PageResults[Account]:
        """
        Fetch the accounts of an item.

        Args:
            item_id: Item id
            account_type: Optional BANK/CREDIT filter; omitted when None
        """
        return self.http.get(
            URL_ACCOUNTS,
            query={"itemId": item_id, "type": account_type},
            parse=PageResults.parser(Account.from_dict),
        )

    def fetch_account(self, account_id: ResourceId) -> Account:
        """Fetch the account details."""
        return self.http.get(URL_ACCOUNTS + "/{id}", segment=account_id, parse=Account.from_dict)

    # -- transactions ---------------------------------------------------

    def fetch_transactions(
        self, account_id: ResourceId, params: TransactionParameters | None = None
    ) -> PageResults[Transaction]:
        """Fetch one page of transactions of an account."""
        query = params.to_query() if params else {}
        query["accountId"] = account_id
        return self.http.get(
            URL_TRANSACTIONS,
            query=query,
            parse=PageResults.parser(Transaction.from_dict),
        )

    def fetch_transaction(self, transaction_id: ResourceId) -> Transaction:
        """Fetch a single transaction."""
        return self.http.get(
            URL_TRANSACTIONS + "/{id}", segment=transaction_id, parse=Transaction.from_dict
        )

    # -- investments ----------------------------------------------------

    def fetch_investments(
        self, item_id: ResourceId, investment_type: InvestmentType | None = None
    ) -> PageResults[Investment]:
        """Fetch the investments of an item, optionally filtered by type."""
        return self.http.get(
            URL_INVESTMENTS,
            query={"itemId": item_id, "type": investment_type},
            parse=PageResults.parser(Investment.from_dict),
        )

    def fetch_investment(self, investment_id: ResourceId) -> Investment:
        return self.http.get(
            URL_INVESTMENTS + "/{id}", segment=investment_id, parse=Investment.from_dict
        )

    # -- categories -----------------------------------------------------

    def fetch_categories(self, parent_id: ResourceId | None = None) -> PageResults[Category]:
        """Fetch categories, optionally only the children of `parent_id`."""
        return self.http.get(
            URL_CATEGORIES,
            query={"parentId": parent_id},
            parse=PageResults.parser(Category.from_dict),
        )

    def fetch_category(self, category_id: ResourceId) -> Category:
        return self.http.get(
            URL_CATEGORIES + "/{id}", segment=category_id, parse=Category.from_dict
        )

    # -- webhooks -------------------------------------------------------

    def fetch_webhooks(self) -> PageResults[Webhook]:
        return self.http.get(URL_WEBHOOKS, parse=PageResults.parser(Webhook.from_dict))

    def fetch_webhook(self, webhook_id: ResourceId) -> Webhook:
        return self.http.get(URL_WEBHOOKS + "/{id}", segment=webhook_id, parse=Webhook.from_dict)

    @raises_validation_errors
    def create_webhook(self, url: str, event: WebhookEvent) -> Webhook:
        """
        Register a webhook.

        Raises:
            PluggyValidationError: If the API rejected the url or event
        """
        webhook = self.http.post(
            URL_WEBHOOKS,
            body={"url": url, "event": WebhookEvent(event).value},
            parse=Webhook.from_dict,
        )
        logger.info(f"Created webhook id={webhook.id} event={WebhookEvent(event).value}")
        return webhook

    @raises_validation_errors
    def update_webhook(self, webhook_id: ResourceId, url: str, event: WebhookEvent) -> Webhook:
        """
        Update a webhook's url and event.

        Raises:
            PluggyValidationError: If the API rejected the url or event
        """
        webhook = self.http.patch(
            URL_WEBHOOKS + "/{id}",
            segment=webhook_id,
            body={"url": url, "event": WebhookEvent(event).value},
            parse=Webhook.from_dict,
        )
        logger.info(f"Updated webhook id={webhook_id}")
        return webhook

    def delete_webhook(self, webhook_id: ResourceId) -> None:
        """Delete a webhook."""
        self.http.delete(URL_WEBHOOKS + "/{id}", segment=webhook_id)
        logger.info(f"Deleted webhook id={webhook_id}")
