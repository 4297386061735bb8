"""Disk usage report over a parsed directory tree."""

import os
from typing import Any

from pydantic import BaseModel, Field

from models.directory_tree import DirectoryEntry

DEFAULT_DEVICE_CAPACITY = 70_000_000
DEFAULT_REQUIRED_FREE = 30_000_000
DEFAULT_SMALL_DIRECTORY_LIMIT = 100_000


class SpaceSettings(BaseModel):
    """Device and threshold settings used to build a report.

    Args:
        device_capacity: Total capacity of the device in bytes.
        required_free: Unused space an update needs, in bytes.
        small_directory_limit: Directories strictly below this size count
            as small.
    """

    device_capacity: int = Field(
        default=DEFAULT_DEVICE_CAPACITY, ge=0, description="Device capacity in bytes"
    )
    required_free: int = Field(
        default=DEFAULT_REQUIRED_FREE, ge=0, description="Required unused space in bytes"
    )
    small_directory_limit: int = Field(
        default=DEFAULT_SMALL_DIRECTORY_LIMIT,
        ge=0,
        description="Exclusive upper bound for small directories",
    )

    @classmethod
    def from_env(cls) -> "SpaceSettings":
        """Build settings from ``LISTING_*`` environment variables.

        Unset variables fall back to the defaults.
        """
        data: dict[str, Any] = {}
        for field, variable in (
            ("device_capacity", "LISTING_DEVICE_CAPACITY"),
            ("required_free", "LISTING_REQUIRED_FREE"),
            ("small_directory_limit", "LISTING_SMALL_DIRECTORY_LIMIT"),
        ):
            value = os.environ.get(variable)
            if value:
                data[field] = value
        return cls(**data)


def required_deficit(used: int, settings: SpaceSettings) -> int:
    """Return how many bytes must be freed to reach ``required_free``.

    Zero or negative means the device already has enough unused space.
    """
    free_space = settings.device_capacity - used
    return settings.required_free - free_space


class DirectorySize(BaseModel):
    """A directory name paired with its computed size."""

    name: str
    size: int


class DiskUsageReport(BaseModel):
    """The figures reported for a parsed transcript.

    Args:
        directory_count: Directories in the tree, root included.
        total_size: Size of the root directory.
        small_directory_limit: Threshold used for ``small_directories_total``.
        small_directories_total: Sum of sizes of all small directories.
        device_capacity: Capacity the report assumed.
        required_free: Unused space the report assumed is needed.
        free_space: ``device_capacity - total_size``.
        required_deficit: ``required_free - free_space``.
        deletion_candidate: Smallest directory at least as large as the
            deficit.
    """

    directory_count: int
    total_size: int
    small_directory_limit: int
    small_directories_total: int
    device_capacity: int
    required_free: int
    free_space: int
    required_deficit: int
    deletion_candidate: DirectorySize

    @property
    def summary(self) -> str:
        """Return the report as human-readable lines."""
        return "\n".join(
            [
                f"Scanned {self.directory_count} directories, and found with at most "
                f"{self.small_directory_limit} bytes: {self.small_directories_total}",
                f"{self.free_space} left on device, but need "
                f"{self.required_deficit} more to update.",
                f"Found directory {self.deletion_candidate.name} with size "
                f"{self.deletion_candidate.size} to ease required amount of space",
            ]
        )


def build_report(root: DirectoryEntry, settings: SpaceSettings | None = None) -> DiskUsageReport:
    """Compute the disk usage report for a tree.

    Args:
        root: Root of the parsed tree.
        settings: Capacity and thresholds; defaults when omitted.

    Returns:
        The populated report.

    Raises:
        ThresholdUnsatisfiableError: If the deficit exceeds the root size,
            which happens when the device cannot satisfy the requirement
            even after deleting everything.
    """
    settings = settings or SpaceSettings()
    total_size = root.size()
    deficit = required_deficit(total_size, settings)
    candidate, candidate_size = root.smallest_directory_at_least(deficit)

    return DiskUsageReport(
        directory_count=root.directory_count(),
        total_size=total_size,
        small_directory_limit=settings.small_directory_limit,
        small_directories_total=root.small_directories_total(settings.small_directory_limit),
        device_capacity=settings.device_capacity,
        required_free=settings.required_free,
        free_space=settings.device_capacity - total_size,
        required_deficit=deficit,
        deletion_candidate=DirectorySize(name=candidate.name, size=candidate_size),
    )
