"""Shared request and response models for the tree endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from models.store import StoredTree


class UploadTranscriptRequest(BaseModel):
    """Request to parse a transcript into a stored tree.

    Attributes:
        transcript: Newline-separated transcript text.
        skip_header: Whether the first non-empty line is the ``cd /`` header.
    """

    transcript: str = Field(description="Newline-separated transcript text")
    skip_header: bool = Field(
        default=True, description="Skip the leading 'cd /' line"
    )


class TreeSummaryResponse(BaseModel):
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

    @classmethod
    def from_stored(cls, stored: StoredTree) -> "TreeSummaryResponse":
        return cls(
            tree_id=stored.tree_id,
            created_at=stored.created_at,
            total_size=stored.root.size(),
            directory_count=stored.root.directory_count(),
            file_count=stored.root.file_count(),
            line_count=stored.stats.line_count,
            unknown_line_count=stored.stats.unknown_line_count,
        )


class TreeListResponse(BaseModel):
    """All stored trees.

    Attributes:
        trees: Summaries, oldest first.
        count: Number of stored trees.
    """

    trees: list[TreeSummaryResponse]
    count: int


class TreeDetailResponse(TreeSummaryResponse):
    """Summary plus the nested tree.

    Attributes:
        root: Nested snapshot with computed directory sizes.
    """

    root: dict[str, Any]


class TreeDeletedResponse(BaseModel):
    tree_id: str
    deleted: bool = True


class TreeSizeResponse(BaseModel):
    tree_id: str
    total_size: int


class DirectoryInfo(BaseModel):
    """A directory and its computed size.

    Attributes:
        name: Directory name.
        size: Total size of the directory.
    """

    name: str
    size: int


class DirectoryListResponse(BaseModel):
    """Directories of a tree in traversal order.

    Attributes:
        tree_id: Identifier of the queried tree.
        directories: Matching directories.
        count: Number of directories returned.
    """

    tree_id: str
    directories: list[DirectoryInfo]
    count: int


class SmallDirectoriesResponse(DirectoryListResponse):
    """Directories strictly smaller than a limit.

    Attributes:
        limit: Exclusive size limit applied.
        total_size: Sum of the matching directories' sizes.
    """

    limit: int
    total_size: int


class SmallestDirectoryResponse(BaseModel):
    """The smallest directory meeting a size requirement.

    Attributes:
        tree_id: Identifier of the queried tree.
        required: Minimum size requested.
        directory: The chosen directory.
    """

    tree_id: str
    required: int
    directory: DirectoryInfo
