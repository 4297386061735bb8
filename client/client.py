"""Main client classes for the Directory Listing Service.

- ListingClient: Synchronous client
- AsyncListingClient: Asynchronous client

Both expose the tree endpoints through the ``trees`` sub-client.

Example:
    Synchronous usage::

        from client import ListingClient

        with ListingClient(base_url="http://localhost:8000") as client:
            tree = client.trees.upload(transcript)
            report = client.trees.report(tree.tree_id)

    Asynchronous usage::

        from client import AsyncListingClient

        async with AsyncListingClient() as client:
            tree = await client.trees.upload(transcript)
"""

from typing import Any

from client._http import AsyncHTTPClient, HTTPClient
from client._trees import AsyncTreesClient, TreesClient


class ListingClient:
    """Synchronous client for the Directory Listing Service REST API.

    Attributes:
        base_url: The base URL of the server.
        timeout: Request timeout in seconds.
        retry_enabled: Whether automatic retry is enabled.
        max_retries: Maximum number of retry attempts.

    Example:
        Manual lifecycle management::

            client = ListingClient()
            try:
                client.trees.list()
            finally:
                client.close()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the server (default: http://localhost:8000).
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Whether to retry connection errors, timeouts and
                HTTP 502/503/504 with exponential backoff (default: False).
            max_retries: Maximum number of retry attempts (default: 3).
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self._http = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self._trees = TreesClient(self._http)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def timeout(self) -> float:
        return self._http.timeout

    @property
    def retry_enabled(self) -> bool:
        return self._http.retry_enabled

    @property
    def max_retries(self) -> int:
        return self._http.max_retries

    @property
    def trees(self) -> TreesClient:
        """Access the tree endpoints (/trees/*)."""
        return self._trees

    def health(self) -> dict[str, Any]:
        """Call the /health endpoint."""
        return self._http.get("/health")

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def __enter__(self) -> "ListingClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ListingClient(base_url={self.base_url!r})"


class AsyncListingClient:
    """Asynchronous client for the Directory Listing Service REST API.

    Same constructor arguments as ListingClient; ``transport`` may be an
    ``httpx.ASGITransport`` to talk to the app in-process.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        self._http = AsyncHTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self._trees = AsyncTreesClient(self._http)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def trees(self) -> AsyncTreesClient:
        """Access the tree endpoints (/trees/*)."""
        return self._trees

    async def health(self) -> dict[str, Any]:
        return await self._http.get("/health")

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> "AsyncListingClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncListingClient(base_url={self.base_url!r})"
