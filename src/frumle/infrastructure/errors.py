"""Exception types for the analysis API client."""

from typing import Optional


class ApiClientError(Exception):
    """Base exception for API client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(ApiClientError):
    """The API key was rejected (HTTP 401)."""

    pass


class QuotaExceededError(ApiClientError):
    """The account has used up its analyses (HTTP 429)."""

    pass


class ApiResponseError(ApiClientError):
    """The server answered with an error status or an unusable body."""

    pass


class ApiConnectionError(ApiClientError):
    """The request never got a response (DNS, connect, timeout, TLS)."""

    pass
