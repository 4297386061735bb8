"""Directory Listing Service API Client Library.

Example:
    Synchronous usage::

        from client import ListingClient

        with ListingClient(base_url="http://localhost:8000") as client:
            tree = client.trees.upload(transcript)
            print(client.trees.size(tree.tree_id).total_size)

    Asynchronous usage::

        from client import AsyncListingClient

        async with AsyncListingClient() as client:
            tree = await client.trees.upload(transcript)

Exports:
    ListingClient: Synchronous client.
    AsyncListingClient: Asynchronous client.

    Exceptions:
        ListingClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        ValidationError: Request validation failed (HTTP 422).
        NotFoundError: Resource not found (HTTP 404).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._trees import (
    AsyncTreesClient,
    DirectoryInfo,
    DirectoryList,
    DiskUsageReport,
    SmallDirectories,
    SmallestDirectory,
    TreeDeleted,
    TreeDetail,
    TreeList,
    TreeSize,
    TreeSummary,
    TreesClient,
)
from client.client import AsyncListingClient, ListingClient
from client.exceptions import (
    APIError,
    ConnectionError,
    ListingClientError,
    NotFoundError,
    ServerError,
    TimeoutError,
    ValidationError,
)

__all__ = [
    # Main clients
    "ListingClient",
    "AsyncListingClient",
    # Sub-clients
    "TreesClient",
    "AsyncTreesClient",
    # Response models
    "DirectoryInfo",
    "DirectoryList",
    "DiskUsageReport",
    "SmallDirectories",
    "SmallestDirectory",
    "TreeDeleted",
    "TreeDetail",
    "TreeList",
    "TreeSize",
    "TreeSummary",
    # Exceptions
    "ListingClientError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
    "ValidationError",
    "NotFoundError",
    "ServerError",
]
