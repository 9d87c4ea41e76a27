"""Base API client for Hiro services with retries and error handling."""

import asyncio
from functools import wraps
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

import httpx

from app.config import config
from app.lib.logger import configure_logger

from .utils import (
    HiroApiError,
    HiroApiNotFoundError,
    HiroApiRateLimitError,
    HiroApiServerError,
    HiroApiTimeoutError,
)

logger = configure_logger(__name__)


def _parse_retry_after(headers: Mapping[str, str]) -> Optional[float]:
    value = headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _retry_on_error(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to retry API calls on transient errors."""

    @wraps(func)
    async def wrapper(self: "BaseHiroApi", *args, **kwargs):
        attempts = max(1, self.max_retries)
        for attempt in range(attempts):
            try:
                return await func(self, *args, **kwargs)
            except (
                httpx.TimeoutException,
                httpx.ConnectError,
                HiroApiRateLimitError,
            ) as e:
                if attempt == attempts - 1:
                    logger.error(
                        "Request failed after all retry attempts",
                        extra={
                            "function": func.__name__,
                            "max_retries": attempts,
                            "error": str(e),
                        },
                    )
                    if isinstance(e, HiroApiRateLimitError):
                        raise
                    raise HiroApiTimeoutError(
                        f"Max retries reached: {str(e)}"
                    ) from e

                retry_delay = self.retry_delay * (2**attempt)  # Exponential backoff
                if isinstance(e, HiroApiRateLimitError) and e.retry_after:
                    retry_delay = max(retry_delay, e.retry_after)
                logger.warning(
                    "Request failed, retrying",
                    extra={
                        "function": func.__name__,
                        "attempt": attempt + 1,
                        "max_retries": attempts,
                        "retry_delay_seconds": retry_delay,
                        "error": str(e),
                    },
                )
                await asyncio.sleep(retry_delay)
        return None

    return wrapper


class BaseHiroApi:
    """Base class for Hiro API clients with shared functionality."""

    # Only log remaining capacity once it drops below this share
    RATE_LIMIT_WARNING_RATIO: ClassVar[float] = 0.2

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the base API client.

        Args:
            base_url: The base URL for the API
            api_key: Hiro API key, sent as X-API-Key when set
            timeout: Per-request timeout in seconds
            max_retries: Attempts for transient failures
            retry_delay: Base delay for exponential backoff
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key if api_key is not None else config.hiro.api_key
        self.timeout = timeout if timeout is not None else config.hiro.request_timeout
        self.max_retries = (
            max_retries if max_retries is not None else config.hiro.max_retries
        )
        self.retry_delay = (
            retry_delay if retry_delay is not None else config.hiro.retry_delay
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        logger.debug("Hiro API client initialized", extra={"base_url": self.base_url})

    def _build_headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._build_headers(),
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    def _log_rate_limits(self, headers: Mapping[str, str]) -> None:
        """Warn when the remaining rate limit capacity runs low.

        Args:
            headers: Response headers containing rate limit information
        """
        for window in ("second", "minute"):
            limit = headers.get(f"x-ratelimit-limit-stacks-{window}")
            remaining = headers.get(f"x-ratelimit-remaining-stacks-{window}")
            if limit is None or remaining is None:
                continue
            try:
                limit_value, remaining_value = int(limit), int(remaining)
            except ValueError:
                continue
            if (
                limit_value > 0
                and remaining_value / limit_value < self.RATE_LIMIT_WARNING_RATIO
            ):
                logger.warning(
                    "Rate limit capacity low",
                    extra={
                        "window": window,
                        "remaining": remaining_value,
                        "limit": limit_value,
                    },
                )

    @_retry_on_error
    async def _amake_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and return the decoded JSON body.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint
            params: Optional query parameters
            json: Optional JSON body

        Returns:
            The parsed JSON response

        Raises:
            HiroApiNotFoundError: On HTTP 404
            HiroApiRateLimitError: On HTTP 429 after all retries
            HiroApiServerError: On HTTP 5xx or a broken connection
            HiroApiTimeoutError: When the API stays unreachable
            HiroApiError: For any other failed response
        """
        logger.debug(
            "API request initiated",
            extra={"request": {"method": method, "endpoint": endpoint}},
        )

        try:
            response = await self._get_client().request(
                method, endpoint, params=params, json=json
            )
        except (httpx.TimeoutException, httpx.ConnectError):
            raise
        except httpx.RequestError as e:
            logger.error(
                "API request failed with transport error",
                extra={
                    "request": {"method": method, "endpoint": endpoint},
                    "error": str(e),
                },
            )
            raise HiroApiServerError(
                f"Transport error for {endpoint}: {str(e)}"
            ) from e
        self._log_rate_limits(response.headers)

        status = response.status_code
        if status == 404:
            logger.info(
                "API resource not found",
                extra={"request": {"method": method, "endpoint": endpoint}},
            )
            raise HiroApiNotFoundError(f"Not found: {endpoint}", status_code=404)

        if status == 429:
            logger.warning(
                "API rate limit exceeded",
                extra={
                    "request": {"method": method, "endpoint": endpoint},
                    "response": {"status_code": status},
                },
            )
            raise HiroApiRateLimitError(
                f"Rate limit exceeded: {endpoint}",
                retry_after=_parse_retry_after(response.headers),
            )

        if status >= 500:
            logger.error(
                "API request failed with server error",
                extra={
                    "request": {"method": method, "endpoint": endpoint},
                    "response": {"status_code": status},
                },
            )
            raise HiroApiServerError(
                f"Server error {status}: {endpoint}", status_code=status
            )

        if status >= 400:
            logger.error(
                "API request failed with HTTP error",
                extra={
                    "request": {"method": method, "endpoint": endpoint},
                    "response": {"status_code": status},
                },
            )
            raise HiroApiError(f"HTTP error {status}: {endpoint}", status_code=status)

        try:
            data = response.json()
        except ValueError as e:
            raise HiroApiError(
                f"Invalid JSON in response from {endpoint}", status_code=status
            ) from e

        logger.debug(
            "API request completed successfully",
            extra={
                "request": {"method": method, "endpoint": endpoint},
                "response": {"status_code": status},
            },
        )
        return data

    async def close(self) -> None:
        """Close the async client."""
        if self._client is not None:
            logger.debug("Closing Hiro API async client")
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit - ensures client cleanup."""
        await self.close()
        return False
