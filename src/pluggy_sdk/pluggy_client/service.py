"""
HTTP transport for the Pluggy API.

Owns the requests session, the API-key exchange and the mapping of HTTP
failures onto the PluggyError family. Resource methods live in client.py.
"""

import json
import logging
import threading
from typing import Any, Callable, TypeVar

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from .errors import ApiErrorBody, PluggyAPIError, PluggyConnectionError, PluggyError
from .query import build_path, build_query

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Status meaning the cached API key is no longer accepted. A 403 is a plain
# permission error and leaves the key alone.
AUTH_REJECTED_STATUS = 401

# Body fields whose values are end-user secrets
REDACTED_FIELDS = ("parameters",)


def redact_body(body: Any) -> Any:
    """Copy of a JSON body safe for logging: credential values become "***"."""
    if not isinstance(body, dict):
        return body
    redacted = dict(body)
    for key in REDACTED_FIELDS:
        value = redacted.get(key)
        if isinstance(value, dict):
            redacted[key] = {k: "***" for k in value}
    return redacted


class APIService:
    """
    Authenticated JSON transport.

    Features:
    - Client id/secret exchanged for an API key on first use
    - API key cached for the process lifetime, refreshed once on a 401
    - JSON bodies in, typed objects out
    - Optional retry with backoff for idempotent requests
    """

    DEFAULT_BASE_URL = "https://api.pluggy.ai"
    DEFAULT_TIMEOUT = 30
    AUTH_ENDPOINT = "/auth"
    API_KEY_HEADER = "X-API-KEY"

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 0,
        backoff_factor: float = 0.5,
    ):
        """
        Initialize the transport.

        Args:
            client_id: Pluggy client id
            client_secret: Pluggy client secret
            base_url: API root (e.g., "https://api.pluggy.ai")
            timeout: Request timeout in seconds
            max_retries: Retry attempts for transient failures of GET/DELETE
                (0 disables retries; failures then reach the caller directly)
            backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout

        self._api_key: str | None = None
        self._lock = threading.Lock()

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": f"pluggy-sdk-python/{__version__}",
            }
        )

        if max_retries > 0:
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET", "DELETE"],
                # Hand the last response to _raise_for_status once retries run out
                raise_on_status=False,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self.session.mount("http://", adapter)
            self.session.mount("https://", adapter)

    # -- authentication -------------------------------------------------

    def _authenticate(self) -> str:
        """Exchange client credentials for an API key."""
        url = f"{self.base_url}{self.AUTH_ENDPOINT}"
        logger.debug(f"Authenticating client {self.client_id} at {url}")

        response = self._send(
            "POST",
            url,
            json_data={"clientId": self.client_id, "clientSecret": self.client_secret},
        )
        self._raise_for_status(response)

        data = self._parse_json(response)
        api_key = data.get("apiKey") if isinstance(data, dict) else None
        if not api_key:
            raise PluggyAPIError(
                status_code=response.status_code,
                message="Authentication response did not contain an apiKey",
                response_body=response.text,
            )

        logger.info(f"Authenticated Pluggy client {self.client_id}")
        return api_key

    def get_api_key(self) -> str:
        """Return the cached API key, authenticating first if needed.

        Concurrent callers without a key wait on the lock; only the first
        performs the exchange.
        """
        api_key = self._api_key
        if api_key:
            return api_key

        with self._lock:
            if not self._api_key:
                self._api_key = self._authenticate()
            return self._api_key

    def invalidate_api_key(self, rejected_key: str) -> None:
        """Drop the cached key if it is still the one that was rejected."""
        with self._lock:
            if self._api_key == rejected_key:
                self._api_key = None

    # -- requests -------------------------------------------------------

    def _send(
        self,
        method: str,
        url: str,
        params: dict | None = None,
        json_data: Any = None,
        api_key: str | None = None,
    ) -> requests.Response:
        """Send one HTTP request, mapping network failures."""
        headers = {self.API_KEY_HEADER: api_key} if api_key else None

        logger.debug(f"API Request: {method} {url} params={params}")
        if json_data is not None and not url.endswith(self.AUTH_ENDPOINT):
            logger.debug(f"Request body: {json.dumps(redact_body(json_data), indent=2)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error to {url}: {e}")
            raise PluggyConnectionError(
                f"Failed to connect to Pluggy at {self.base_url}: {e}"
            ) from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout for {url}: {e}")
            raise PluggyConnectionError(f"Request to Pluggy timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise PluggyError(f"Request failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")
        return response

    @staticmethod
    def _raise_for_status(response: requests.Response) -> None:
        """Raise PluggyAPIError for a non-2xx response."""
        if 200 <= response.status_code < 300:
            return

        error_body = response.text
        api_error = None
        message = response.reason or "Error"

        try:
            error_json = response.json()
        except ValueError:
            error_json = None

        if isinstance(error_json, dict):
            api_error = ApiErrorBody.from_dict(error_json)
            message = api_error.message or message

        logger.error(f"API Error {response.status_code}: {message}")
        if api_error and api_error.errors:
            logger.error(f"Error details: {api_error.errors}")
        logger.debug(f"Full response body: {error_body}")

        raise PluggyAPIError(
            status_code=response.status_code,
            message=message,
            response_body=error_body,
            api_error=api_error,
        )

    @staticmethod
    def _parse_json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON in response ({response.status_code})")
            raise PluggyAPIError(
                status_code=response.status_code,
                message=f"Invalid JSON in response: {e}",
                response_body=response.text,
            ) from e

    def request(
        self,
        method: str,
        path_template: str,
        segment: object | None = None,
        body: Any = None,
        query: dict[str, Any] | None = None,
        parse: Callable[[Any], T] | None = None,
    ) -> T | None:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method
            path_template: Path under the base URL, optionally with `{id}`
            segment: Value substituted for `{id}`
            body: JSON body
            query: Query parameters; None values are dropped
            parse: Converts the decoded JSON body into the result. When None
                the body is discarded and None is returned.

        Returns:
            The parsed response, or None when no parser is given

        Raises:
            PluggyAPIError: If the API returns an error
            PluggyConnectionError: If the API is unreachable
        """
        url = f"{self.base_url}{build_path(path_template, segment)}"
        params = build_query(query)

        api_key = self.get_api_key()
        response = self._send(method, url, params=params, json_data=body, api_key=api_key)

        if response.status_code == AUTH_REJECTED_STATUS:
            logger.info(f"API key rejected ({response.status_code}), re-authenticating")
            self.invalidate_api_key(api_key)
            api_key = self.get_api_key()
            response = self._send(method, url, params=params, json_data=body, api_key=api_key)

        self._raise_for_status(response)

        if parse is None:
            return None

        return parse(self._parse_json(response))

    def get(
        self,
        path_template: str,
        segment: object | None = None,
        query: dict[str, Any] | None = None,
        parse: Callable[[Any], T] | None = None,
    ) -> T | None:
        return self.request("GET", path_template, segment=segment, query=query, parse=parse)

    def post(
        self,
        path_template: str,
        body: Any,
        parse: Callable[[Any], T] | None = None,
    ) -> T | None:
        return self.request("POST", path_template, body=body, parse=parse)

    def patch(
        self,
        path_template: str,
        body: Any,
        segment: object | None = None,
        parse: Callable[[Any], T] | None = None,
    ) -> T | None:
        return self.request("PATCH", path_template, segment=segment, body=body, parse=parse)

    def delete(self, path_template: str, segment: object | None = None) -> None:
        """Delete a resource. The response body is discarded."""
        self.request("DELETE", path_template, segment=segment)

    def close(self) -> None:
        self.session.close()
