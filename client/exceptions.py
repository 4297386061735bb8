"""Exception hierarchy for the Directory Listing Service client.

Exception Hierarchy:
    ListingClientError (base)
    ├── ConnectionError - Network/connection failures
    ├── TimeoutError - Request timeout
    └── APIError - Server returned an error response
        ├── ValidationError (HTTP 422), e.g. a transcript with a malformed size
        ├── NotFoundError (HTTP 404), e.g. unknown tree or unsatisfiable threshold
        └── ServerError (HTTP 5xx)

Error responses from the service carry an ``error`` title (such as
``"Tree Not Found"``) and extra fields that depend on the failure. APIError
keeps those fields in ``details``; the subclasses expose the ones that
matter for transcripts and trees as attributes.

Example:
    Catching specific errors::

        try:
            client.trees.smallest_directory(tree_id, required=10**12)
        except NotFoundError as e:
            if e.is_threshold_unsatisfiable:
                print(f"Largest directory is only {e.largest_size} bytes")
"""

from typing import Any

TREE_NOT_FOUND = "Tree Not Found"
THRESHOLD_UNSATISFIABLE = "Threshold Unsatisfiable"
MALFORMED_SIZE = "Malformed Size"


class ListingClientError(Exception):
    """Base exception for all client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """Return the error message."""
        return self.message


class ConnectionError(ListingClientError):
    """Failed to connect to the server.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed to connect.
        cause: The underlying httpx exception.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize the connection error.

        Args:
            message: Human-readable error description.
            url: The URL that failed to connect.
            cause: The underlying httpx exception.
        """
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        """Return the message with the failing URL, if known."""
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class TimeoutError(ListingClientError):
    """Request took longer than the configured timeout.

    Large transcripts are parsed synchronously by the server, so an upload
    can time out where queries would not.

    Attributes:
        message: Human-readable error description.
        timeout: The timeout value in seconds.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        """Initialize the timeout error.

        Args:
            message: Human-readable error description.
            timeout: The timeout value in seconds.
            url: The URL that timed out.
        """
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        """Return the message with the timeout and URL, if known."""
        extras = []
        if self.timeout is not None:
            extras.append(f"timeout: {self.timeout}s")
        if self.url:
            extras.append(f"url: {self.url}")
        if not extras:
            return self.message
        return f"{self.message} ({', '.join(extras)})"


class APIError(ListingClientError):
    """Server returned an HTTP error status.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the server.
        error_type: Error type from the response body, if any.
        details: Extra fields from the response body, if any.
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the API error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from the server.
            error_type: Error type from the response body, if any.
            details: Extra fields from the response body, if any.
            response_body: Raw response body for debugging.
        """
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    @property
    def title(self) -> str | None:
        """The service's ``error`` title, e.g. ``"Tree Not Found"``."""
        if isinstance(self.response_body, dict):
            return self.response_body.get("error")
        return None

    def _detail(self, key: str) -> Any:
        return (self.details or {}).get(key)

    def __str__(self) -> str:
        """Return the status code, error type and message."""
        if self.error_type:
            return f"[HTTP {self.status_code}] [{self.error_type}] {self.message}"
        return f"[HTTP {self.status_code}] {self.message}"


class ValidationError(APIError):
    """Request rejected as invalid (HTTP 422).

    Raised both for malformed requests and for transcripts whose listing
    carries a size that does not parse; in the second case ``line`` and
    ``line_number`` locate the offending listing.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the validation error.

        Args:
            message: Human-readable error message.
            details: Extra fields from the response body, if any.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=422,
            error_type="validation_error",
            details=details,
            response_body=response_body,
        )

    @property
    def is_malformed_size(self) -> bool:
        return self.title == MALFORMED_SIZE

    @property
    def line(self) -> str | None:
        """The transcript line with the malformed size."""
        return self._detail("line")

    @property
    def line_number(self) -> int | None:
        """1-based position of that line in the transcript."""
        return self._detail("line_number")


class NotFoundError(APIError):
    """Resource not found (HTTP 404).

    Covers two service failures: an unknown tree id, and a threshold query
    that no directory satisfies.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the not-found error.

        Args:
            message: Human-readable error message.
            details: Extra fields from the response body, if any.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=404,
            error_type="not_found",
            details=details,
            response_body=response_body,
        )

    @property
    def is_tree_not_found(self) -> bool:
        return self.title == TREE_NOT_FOUND

    @property
    def is_threshold_unsatisfiable(self) -> bool:
        return self.title == THRESHOLD_UNSATISFIABLE

    @property
    def requested_tree(self) -> str | None:
        return self._detail("requested_tree")

    @property
    def available_trees(self) -> list[str]:
        return self._detail("available_trees") or []

    @property
    def largest_size(self) -> int | None:
        """Size of the largest directory when no directory was large enough."""
        return self._detail("largest_size")


class ServerError(APIError):
    """Server-side failure (HTTP 5xx). Retried when retry is enabled."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        """Initialize the server error.

        Args:
            message: Human-readable error message.
            status_code: HTTP status code from the server (default: 500).
            details: Extra fields from the response body, if any.
            response_body: Raw response body for debugging.
        """
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="server_error",
            details=details,
            response_body=response_body,
        )
