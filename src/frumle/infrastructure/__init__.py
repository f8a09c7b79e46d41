"""
Infrastructure layer for frumle: the HTTP client for the analysis API.
"""

from .api_client import (
    ANALYZE_ENDPOINT,
    STATUS_ENDPOINT,
    FrumleApiClient,
    create_api_client,
)
from .errors import (
    ApiClientError,
    ApiConnectionError,
    ApiResponseError,
    AuthenticationError,
    QuotaExceededError,
)

__all__ = [
    "FrumleApiClient",
    "create_api_client",
    "ANALYZE_ENDPOINT",
    "STATUS_ENDPOINT",
    "ApiClientError",
    "ApiConnectionError",
    "ApiResponseError",
    "AuthenticationError",
    "QuotaExceededError",
]
