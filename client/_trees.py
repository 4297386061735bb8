"""Tree sub-client for the Directory Listing Service API.

This module provides TreesClient and AsyncTreesClient for the ``/trees``
endpoints.

This is an internal module. Import from `client` instead.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from client._base import AsyncBaseClient, BaseClient


# Response models for tree endpoints


class TreeSummary(BaseModel):
    """Summary of a stored tree.

    Attributes:
        tree_id: Identifier of the stored tree.
        created_at: When the transcript was parsed.
        total_size: Size of the root directory.
        directory_count: Directories in the tree, root included.
        file_count: Files in the tree.
        line_count: Transcript lines consumed.
        unknown_line_count: Lines skipped as carrying no structure.
    """

    tree_id: str
    created_at: datetime
    total_size: int
    directory_count: int
    file_count: int
    line_count: int
    unknown_line_count: int


class TreeList(BaseModel):
    trees: list[TreeSummary]
    count: int


class TreeDetail(TreeSummary):
    """Summary plus the nested snapshot (``kind``, ``name``, ``size``, ``children``)."""

    root: dict[str, Any]


class TreeDeleted(BaseModel):
    tree_id: str
    deleted: bool


class TreeSize(BaseModel):
    tree_id: str
    total_size: int


class DirectoryInfo(BaseModel):
    name: str
    size: int


class DirectoryList(BaseModel):
    tree_id: str
    directories: list[DirectoryInfo]
    count: int


class SmallDirectories(DirectoryList):
    limit: int
    total_size: int


class SmallestDirectory(BaseModel):
    tree_id: str
    required: int
    directory: DirectoryInfo


class DiskUsageReport(BaseModel):
    """Disk usage figures for a stored tree.

    Attributes:
        directory_count: Directories in the tree, root included.
        total_size: Size of the root directory.
        small_directory_limit: Threshold applied for small directories.
        small_directories_total: Sum of sizes of the small directories.
        device_capacity: Capacity the report assumed.
        required_free: Unused space the report assumed is needed.
        free_space: Capacity minus total size.
        required_deficit: Bytes that must be freed.
        deletion_candidate: Smallest directory at least as large as the deficit.
    """

    directory_count: int
    total_size: int
    small_directory_limit: int
    small_directories_total: int
    device_capacity: int
    required_free: int
    free_space: int
    required_deficit: int
    deletion_candidate: DirectoryInfo


def _report_params(
    device_capacity: int | None,
    required_free: int | None,
    small_directory_limit: int | None,
) -> dict[str, Any]:
    return {
        "device_capacity": device_capacity,
        "required_free": required_free,
        "small_directory_limit": small_directory_limit,
    }


# Synchronous TreesClient


class TreesClient(BaseClient):
    """Synchronous client for the tree endpoints (/trees/*).

    Example:
        with ListingClient() as client:
            tree = client.trees.upload(open("transcript.txt").read())
            print(client.trees.small_directories(tree.tree_id).total_size)
            print(client.trees.report(tree.tree_id).deletion_candidate)
    """

    _BASE_PATH = "/trees"

    def upload(self, transcript: str, skip_header: bool = True) -> TreeSummary:
        """Parse a transcript on the server and store the tree.

        Args:
            transcript: Newline-separated transcript text.
            skip_header: Whether the first non-empty line is ``cd /``.

        Returns:
            Summary of the stored tree.

        Raises:
            ValidationError: If a listing has a malformed size.
            APIError: If the request fails.
        """
        return self._post(
            TreeSummary, json={"transcript": transcript, "skip_header": skip_header}
        )

    def list(self) -> TreeList:
        """List every stored tree, oldest first."""
        return self._get(TreeList)

    def get(self, tree_id: str) -> TreeDetail:
        """Get a stored tree with its nested snapshot.

        Raises:
            NotFoundError: If the tree does not exist.
        """
        return self._get(TreeDetail, tree_id)

    def delete(self, tree_id: str) -> TreeDeleted:
        """Remove a stored tree.

        Raises:
            NotFoundError: If the tree does not exist.
        """
        return self._delete(TreeDeleted, tree_id)

    def size(self, tree_id: str) -> TreeSize:
        """Get the total size of a tree's root."""
        return self._get(TreeSize, tree_id, "size")

    def directories(self, tree_id: str) -> DirectoryList:
        """List every directory of a tree in pre-order with sizes."""
        return self._get(DirectoryList, tree_id, "directories")

    def small_directories(self, tree_id: str, limit: int | None = None) -> SmallDirectories:
        """List directories strictly smaller than ``limit``.

        Args:
            tree_id: The tree to query.
            limit: Exclusive size limit; the server's configured limit when None.
        """
        return self._get(
            SmallDirectories, tree_id, "small-directories", params={"limit": limit}
        )

    def smallest_directory(self, tree_id: str, required: int) -> SmallestDirectory:
        """Get the smallest directory at least ``required`` bytes large.

        Raises:
            NotFoundError: If the tree does not exist or no directory is
                large enough.
        """
        return self._get(
            SmallestDirectory, tree_id, "smallest-directory", params={"required": required}
        )

    def report(
        self,
        tree_id: str,
        device_capacity: int | None = None,
        required_free: int | None = None,
        small_directory_limit: int | None = None,
    ) -> DiskUsageReport:
        """Get the disk usage report, optionally overriding server settings."""
        return self._get(
            DiskUsageReport,
            tree_id,
            "report",
            params=_report_params(device_capacity, required_free, small_directory_limit),
        )


# Asynchronous AsyncTreesClient


class AsyncTreesClient(AsyncBaseClient):
    """Asynchronous client for the tree endpoints (/trees/*).

    Example:
        async with AsyncListingClient() as client:
            tree = await client.trees.upload(transcript)
            size = await client.trees.size(tree.tree_id)
    """

    _BASE_PATH = "/trees"

    async def upload(self, transcript: str, skip_header: bool = True) -> TreeSummary:
        """Parse a transcript on the server and store the tree."""
        return await self._post(
            TreeSummary, json={"transcript": transcript, "skip_header": skip_header}
        )

    async def list(self) -> TreeList:
        return await self._get(TreeList)

    async def get(self, tree_id: str) -> TreeDetail:
        return await self._get(TreeDetail, tree_id)

    async def delete(self, tree_id: str) -> TreeDeleted:
        return await self._delete(TreeDeleted, tree_id)

    async def size(self, tree_id: str) -> TreeSize:
        return await self._get(TreeSize, tree_id, "size")

    async def directories(self, tree_id: str) -> DirectoryList:
        return await self._get(DirectoryList, tree_id, "directories")

    async def small_directories(
        self, tree_id: str, limit: int | None = None
    ) -> SmallDirectories:
        return await self._get(
            SmallDirectories, tree_id, "small-directories", params={"limit": limit}
        )

    async def smallest_directory(self, tree_id: str, required: int) -> SmallestDirectory:
        return await self._get(
            SmallestDirectory, tree_id, "smallest-directory", params={"required": required}
        )

    async def report(
        self,
        tree_id: str,
        device_capacity: int | None = None,
        required_free: int | None = None,
        small_directory_limit: int | None = None,
    ) -> DiskUsageReport:
        return await self._get(
            DiskUsageReport,
            tree_id,
            "report",
            params=_report_params(device_capacity, required_free, small_directory_limit),
        )
