"""Internal HTTP layer shared by the sync and async clients.

Turns error responses into client exceptions and retries transient failures
with exponential backoff when enabled.

This is an internal module and should not be imported directly by users.
"""

import asyncio
import time
from typing import Any, Literal

import httpx

from client.exceptions import (
    APIError,
    ConnectionError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)

HttpMethod = Literal["GET", "POST", "DELETE"]

# Retried only when retry is enabled
RETRYABLE_STATUS_CODES = {502, 503, 504}

DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None, dict | None]:
    """Extract message, error type and details from an error response.

    Understands the service's ``{"error", "detail", ...}`` bodies and
    FastAPI's own ``{"detail": [...]}`` validation errors, falling back to
    the raw text.

    Returns:
        A tuple of (message, error_type, details).
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return (text or f"HTTP {response.status_code} error"), None, None

    if not isinstance(body, dict):
        return str(body), None, None

    detail = body.get("detail")
    if isinstance(detail, list):
        messages = [
            f"{err.get('loc', ['unknown'])[-1]}: {err.get('msg', 'invalid')}"
            for err in detail
        ]
        return "; ".join(messages), "validation_error", {"errors": detail}

    extra = {key: value for key, value in body.items() if key not in ("error", "detail", "type")}
    if isinstance(detail, str):
        return detail, body.get("type"), extra or None
    if "error" in body:
        return str(body["error"]), body.get("type"), extra or None
    return str(body), None, None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the client exception matching an error status code.

    Raises:
        ValidationError: For HTTP 422 responses.
        NotFoundError: For HTTP 404 responses.
        ServerError: For HTTP 5xx responses.
        APIError: For other HTTP 4xx responses.
    """
    if response.is_success:
        return

    message, error_type, details = _parse_error_response(response)
    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    status_code = response.status_code
    if status_code == 422:
        raise ValidationError(message, details=details, response_body=response_body)
    if status_code == 404:
        raise NotFoundError(message, details=details, response_body=response_body)
    if status_code >= 500:
        raise ServerError(
            message, status_code=status_code, details=details, response_body=response_body
        )
    raise APIError(
        message,
        status_code=status_code,
        error_type=error_type,
        details=details,
        response_body=response_body,
    )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Calculate the delay before the next retry attempt.

    Args:
        attempt: The zero-based attempt that just failed.
        base: The delay after the first failure, in seconds.

    Returns:
        ``base * 2**attempt``, capped at DEFAULT_RETRY_BACKOFF_MAX.
    """
    return min(base * (2 ** attempt), DEFAULT_RETRY_BACKOFF_MAX)


def _drop_none(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Remove unset query parameters.

    Sub-clients pass every optional query parameter (such as a report
    override) and leave it None when the server's setting should apply.

    Args:
        params: Query parameters, possibly with None values.

    Returns:
        The parameters without None values.
    """
    if not params:
        return params
    return {key: value for key, value in params.items() if value is not None}


def _decode(response: httpx.Response) -> Any:
    """Raise for an error status, otherwise return the JSON body.

    Args:
        response: The final response of a request.

    Returns:
        The parsed JSON body, or None for an empty body.
    """
    _raise_for_status(response)
    if response.content:
        return response.json()
    return None


class _RetryingClient:
    """Configuration and retry bookkeeping shared by both HTTP clients."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
    ) -> None:
        """Store the connection and retry settings.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry transient failures.
            max_retries: Maximum number of retry attempts.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

    @property
    def _attempts(self) -> int:
        """Total tries per request, the first one included."""
        return self.max_retries + 1 if self.retry_enabled else 1

    def _should_retry_status(self, response: httpx.Response, attempt: int) -> bool:
        return (
            self.retry_enabled
            and response.status_code in RETRYABLE_STATUS_CODES
            and attempt < self._attempts - 1
        )

    def _transport_error(self, error: httpx.TransportError, url: str) -> Exception:
        """Wrap an httpx transport failure in the matching client exception.

        Args:
            error: The httpx exception raised for the request.
            url: The full URL that was requested.

        Returns:
            A TimeoutError for timeouts, otherwise a ConnectionError.
        """
        if isinstance(error, httpx.TimeoutException):
            return TimeoutError(
                f"Request to {url} timed out", timeout=self.timeout, url=url
            )
        return ConnectionError(f"Failed to connect to {url}", url=url, cause=error)

    def _is_last_attempt(self, attempt: int) -> bool:
        return not self.retry_enabled or attempt >= self._attempts - 1


class HTTPClient(_RetryingClient):
    """Synchronous HTTP client wrapping ``httpx.Client``.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry transient failures.
            max_retries: Maximum number of retry attempts.
            transport: Custom httpx transport (e.g., MockTransport for testing).
        """
        super().__init__(base_url, timeout, retry_enabled, max_retries)
        self._client = httpx.Client(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: The HTTP method.
            path: URL path relative to the base URL.
            params: Query parameters; None values are dropped.
            json: JSON body to send.

        Returns:
            The parsed JSON response, or None for an empty body.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _drop_none(params)

        for attempt in range(self._attempts):
            try:
                response = self._client.request(method, path, params=params, json=json)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                if self._is_last_attempt(attempt):
                    raise self._transport_error(e, url) from e
                time.sleep(_calculate_backoff(attempt))
                continue

            if self._should_retry_status(response, attempt):
                time.sleep(_calculate_backoff(attempt))
                continue
            return _decode(response)

        raise RuntimeError("Unexpected error in request retry loop")

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request and return the parsed JSON response."""
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make a POST request and return the parsed JSON response."""
        return self.request("POST", path, params=params, json=json)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a DELETE request and return the parsed JSON response."""
        return self.request("DELETE", path, params=params)


class AsyncHTTPClient(_RetryingClient):
    """Asynchronous HTTP client wrapping ``httpx.AsyncClient``.

    Same behavior as HTTPClient.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url, timeout, retry_enabled, max_retries)
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: The HTTP method.
            path: URL path relative to the base URL.
            params: Query parameters; None values are dropped.
            json: JSON body to send.

        Returns:
            The parsed JSON response, or None for an empty body.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _drop_none(params)

        for attempt in range(self._attempts):
            try:
                response = await self._client.request(
                    method, path, params=params, json=json
                )
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                if self._is_last_attempt(attempt):
                    raise self._transport_error(e, url) from e
                await asyncio.sleep(_calculate_backoff(attempt))
                continue

            if self._should_retry_status(response, attempt):
                await asyncio.sleep(_calculate_backoff(attempt))
                continue
            return _decode(response)

        raise RuntimeError("Unexpected error in request retry loop")

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)
