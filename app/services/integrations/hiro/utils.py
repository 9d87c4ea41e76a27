"""Utility classes and types for Hiro API integration."""

from enum import Enum
from typing import Optional


class HiroApiError(Exception):
    """Base exception for Hiro API errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HiroApiNotFoundError(HiroApiError):
    """Exception for resources the API does not know about (HTTP 404)."""

    pass


class HiroApiRateLimitError(HiroApiError):
    """Exception for rate limit errors."""

    def __init__(self, message: str, retry_after: Optional[float] = None):
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


class HiroApiServerError(HiroApiError):
    """Exception for 5xx responses from the API."""

    pass


class HiroApiTimeoutError(HiroApiError):
    """Exception for timeout errors."""

    pass


class Network(str, Enum):
    """Stacks networks served by the Hiro API."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
