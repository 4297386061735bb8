"""Directory Listing Service data models.

This package contains the transcript lexer, the directory tree and its
queries, the disk usage report, and the in-memory tree store.
"""

from models.directory_tree import (
    DirectoryEntry,
    Entry,
    FileEntry,
    ParseStats,
    ThresholdUnsatisfiableError,
    build_tree,
    build_tree_with_stats,
    parse_transcript,
)
from models.space_report import DiskUsageReport, SpaceSettings, build_report
from models.store import StoredTree, TreeNotFoundError, TreeStore
from models.transcript import (
    EnterDirectory,
    LeaveDirectory,
    ListedDirectory,
    ListedFile,
    MalformedSizeError,
    TranscriptLine,
    Unknown,
    classify_line,
    prepare_lines,
)

__all__ = [
    "EnterDirectory",
    "LeaveDirectory",
    "ListedDirectory",
    "ListedFile",
    "Unknown",
    "TranscriptLine",
    "MalformedSizeError",
    "classify_line",
    "prepare_lines",
    "FileEntry",
    "DirectoryEntry",
    "Entry",
    "ParseStats",
    "ThresholdUnsatisfiableError",
    "build_tree",
    "build_tree_with_stats",
    "parse_transcript",
    "SpaceSettings",
    "DiskUsageReport",
    "build_report",
    "StoredTree",
    "TreeStore",
    "TreeNotFoundError",
]
