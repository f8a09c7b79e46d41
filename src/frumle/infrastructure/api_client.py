"""HTTP client for the frumle analysis API."""

import logging
from typing import Any, Optional

import httpx

from frumle.core.config import ApiConfig

from .errors import (
    ApiConnectionError,
    ApiResponseError,
    AuthenticationError,
    QuotaExceededError,
)

logger = logging.getLogger(__name__)

STATUS_ENDPOINT = "/api/v1/auth/status/apikey"
ANALYZE_ENDPOINT = "/api/v1/analyze/apikey"


class FrumleApiClient:
    """
    Client for the frumle backend.

    Each call is a single blocking request authenticated with a bearer API
    key. There is no retry: failures surface as ApiClientError subclasses.
    """

    def __init__(
        self,
        api_url: str,
        timeout: float = 120.0,
        connect_timeout: float = 30.0,
        max_redirects: int = 3,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the API client.

        Args:
            api_url: Base URL of the backend
            timeout: Total request timeout in seconds
            connect_timeout: Connection timeout in seconds
            max_redirects: Redirects followed before giving up
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self._api_url = api_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self._api_url,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            follow_redirects=True,
            max_redirects=max_redirects,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls, config: ApiConfig, transport: Optional[httpx.BaseTransport] = None
    ) -> "FrumleApiClient":
        return cls(
            api_url=config.api_url,
            timeout=config.timeout,
            connect_timeout=config.connect_timeout,
            max_redirects=config.max_redirects,
            transport=transport,
        )

    @property
    def api_url(self) -> str:
        return self._api_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "FrumleApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def verify_api_key(self, api_key: str) -> dict[str, Any]:
        """
        Check an API key with the backend without requiring it to be saved.

        Returns:
            Status response with quota and usage info
        """
        return self.request("GET", STATUS_ENDPOINT, None, api_key)

    def check_status(self, api_key: str) -> dict[str, Any]:
        """Status of the saved API key: quota and usage."""
        return self.verify_api_key(api_key)

    def analyze_codebase(self, payload: dict[str, Any], api_key: str) -> dict[str, Any]:
        """Submit a codebase payload for analysis."""
        return self.request("POST", ANALYZE_ENDPOINT, payload, api_key)

    def request(
        self,
        method: str,
        endpoint: str,
        body: Optional[dict[str, Any]],
        api_key: str,
    ) -> dict[str, Any]:
        """
        Send a request and decode the JSON object it returns.

        Raises:
            AuthenticationError: For HTTP 401
            QuotaExceededError: For HTTP 429
            ApiResponseError: For other error statuses or a non-object body
            ApiConnectionError: When no response was received
        """
        headers = {"Authorization": f"Bearer {api_key}"}
        json_body = body if method.upper() == "POST" else None

        try:
            response = self._client.request(method, endpoint, headers=headers, json=json_body)
        except httpx.TimeoutException as e:
            raise ApiConnectionError(f"HTTP request timed out: {e}") from e
        except httpx.RequestError as e:
            raise ApiConnectionError(f"HTTP request failed: {e}") from e

        status = response.status_code
        logger.debug(f"{method} {endpoint} -> {status}")

        try:
            data = response.json()
        except ValueError:
            data = None

        if status == 401:
            raise AuthenticationError(
                "Invalid API key. Please check your key and try again.", status_code=status
            )

        if status == 429:
            message = _error_message(data) or "Quota exceeded. Check your usage with: frumle status"
            raise QuotaExceededError(message, status_code=status)

        if status >= 400:
            message = _error_message(data) or f"HTTP {status} error"
            raise ApiResponseError(message, status_code=status)

        if not isinstance(data, dict):
            raise ApiResponseError("Invalid JSON response from server", status_code=status)

        return data


def _error_message(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    for key in ("message", "error"):
        value = data.get(key)
        if value:
            return str(value)
    return None


def create_api_client(
    config: Optional[ApiConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> FrumleApiClient:
    """
    Factory function to create an API client.

    Args:
        config: API configuration. If None, defaults plus env overrides apply.
        transport: Optional httpx transport

    Returns:
        Configured FrumleApiClient instance
    """
    if config is None:
        from frumle.core.config import load_config

        config = load_config().api
    return FrumleApiClient.from_config(config, transport=transport)
