"""Directory tree built from a transcript, plus its aggregate queries.

The tree is a nest of ``FileEntry`` and ``DirectoryEntry`` models. Each
directory owns its children exclusively and there are no parent
back-references. Children are held in tuples, so a finished tree cannot
change; sizes are still recomputed from the subtree on every call.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.transcript import (
    EnterDirectory,
    LeaveDirectory,
    ListedDirectory,
    ListedFile,
    Unknown,
    lex_transcript,
    prepare_lines,
)

logger = logging.getLogger(__name__)

ROOT_NAME = "/"


class ThresholdUnsatisfiableError(LookupError):
    """Raised when no directory is at least as large as required.

    Args:
        required: The requested minimum size.
        largest_size: Size of the largest directory in the tree.
    """

    def __init__(self, required: int, largest_size: int):
        self.required = required
        self.largest_size = largest_size
        super().__init__(
            f"No directory satisfies the requirement of {required} bytes "
            f"(largest directory is {largest_size} bytes)"
        )


class FileEntry(BaseModel):
    """A file listed in the transcript.

    Args:
        name: File name, unique among siblings by convention only.
        size: Size in bytes.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    name: str = Field(min_length=1, description="File name")
    size: int = Field(ge=0, description="File size in bytes")


class DirectoryEntry(BaseModel):
    """A directory and the entries it owns, in transcript order.

    Args:
        name: Directory name (``/`` for the root).
        children: Files and directories directly inside this one.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["directory"] = "directory"
    name: str = Field(min_length=1, description="Directory name")
    children: tuple["Entry", ...] = Field(
        default=(), description="Entries directly inside this directory"
    )

    def size(self) -> int:
        """Return the total size of every file below this directory."""
        return self._subtree_sizes()[id(self)]

    def _subtree_sizes(self) -> dict[int, int]:
        """Size every directory in the subtree, keyed by ``id()``.

        Reversed pre-order visits each directory after all of its
        descendants, so one pass sums children that are already sized.
        """
        sizes: dict[int, int] = {}
        for directory in reversed(self.all_directories()):
            sizes[id(directory)] = sum(
                child.size if isinstance(child, FileEntry) else sizes[id(child)]
                for child in directory.children
            )
        return sizes

    def subdirectories(self) -> list["DirectoryEntry"]:
        """Return the immediate child directories."""
        return [child for child in self.children if isinstance(child, DirectoryEntry)]

    def files(self) -> list[FileEntry]:
        """Return the immediate child files."""
        return [child for child in self.children if isinstance(child, FileEntry)]

    def find_subdirectory(self, name: str) -> "DirectoryEntry | None":
        """Return the most recently added child directory called ``name``.

        Listing a directory with ``dir`` and later entering it with ``cd``
        leaves two same-named siblings; the later one holds the content.
        """
        for child in reversed(self.children):
            if isinstance(child, DirectoryEntry) and child.name == name:
                return child
        return None

    def iter_directories(self) -> Iterator["DirectoryEntry"]:
        """Yield this directory and every directory below it, pre-order."""
        pending = [self]
        while pending:
            directory = pending.pop()
            yield directory
            pending.extend(reversed(directory.subdirectories()))

    def iter_files(self) -> Iterator[FileEntry]:
        """Yield every file below this directory in pre-order."""
        for directory in self.iter_directories():
            yield from directory.files()

    def all_directories(self) -> list["DirectoryEntry"]:
        """Return every directory in this subtree, this one included."""
        return list(self.iter_directories())

    def directory_count(self) -> int:
        return sum(1 for _ in self.iter_directories())

    def file_count(self) -> int:
        return sum(1 for _ in self.iter_files())

    def directory_sizes(self) -> list[tuple["DirectoryEntry", int]]:
        """Pair every directory in the subtree with its size, pre-order."""
        directories = self.all_directories()
        sizes = self._subtree_sizes()
        return [(directory, sizes[id(directory)]) for directory in directories]

    def small_directories(self, limit: int) -> list[tuple["DirectoryEntry", int]]:
        """Return every directory whose size is strictly below ``limit``.

        Each directory is judged on its own, so a large directory still lets
        its small subdirectories through.
        """
        return [(d, size) for d, size in self.directory_sizes() if size < limit]

    def small_directories_total(self, limit: int) -> int:
        """Sum the sizes of every directory smaller than ``limit``."""
        return sum(size for _, size in self.small_directories(limit))

    def smallest_directory_at_least(self, required: int) -> tuple["DirectoryEntry", int]:
        """Find the smallest directory whose size is at least ``required``.

        Ties go to the directory encountered first in traversal order.

        Args:
            required: Minimum acceptable size in bytes.

        Returns:
            The chosen directory and its size.

        Raises:
            ThresholdUnsatisfiableError: If no directory is large enough.
        """
        sized = self.directory_sizes()
        candidates = sorted(
            ((d, size) for d, size in sized if size >= required),
            key=lambda pair: pair[1],
        )
        if not candidates:
            largest = max(size for _, size in sized)
            raise ThresholdUnsatisfiableError(required, largest)
        return candidates[0]

    def to_snapshot(self) -> dict[str, Any]:
        """Return a JSON-ready view of this subtree with computed sizes."""
        sizes = self._subtree_sizes()

        def node(directory: "DirectoryEntry") -> dict[str, Any]:
            return {
                "kind": directory.kind,
                "name": directory.name,
                "size": sizes[id(directory)],
                "children": [],
            }

        snapshot = node(self)
        pending = [(self, snapshot)]
        while pending:
            directory, view = pending.pop()
            for child in directory.children:
                if isinstance(child, FileEntry):
                    view["children"].append(child.model_dump())
                else:
                    child_view = node(child)
                    view["children"].append(child_view)
                    pending.append((child, child_view))
        return snapshot


Entry = Annotated[Union[FileEntry, DirectoryEntry], Field(discriminator="kind")]

DirectoryEntry.model_rebuild()


class ParseStats(BaseModel):
    """Counters collected while replaying a transcript.

    Args:
        line_count: Lines consumed.
        unknown_line_count: Lines skipped as carrying no structure.
        file_count: File entries created.
        directory_count: Directory entries created, root included.
        ignored_leave_count: ``cd ..`` lines ignored at the root.
    """

    line_count: int = 0
    unknown_line_count: int = 0
    file_count: int = 0
    directory_count: int = 1
    ignored_leave_count: int = 0


class _OpenDirectory:
    """A directory still being filled while the transcript is replayed.

    ``slot`` is the index in the parent's children reserved for this
    directory when it was entered.
    """

    def __init__(self, name: str, slot: int | None = None):
        self.name = name
        self.slot = slot
        self.children: list[Any] = []

    def close(self) -> DirectoryEntry:
        return DirectoryEntry(name=self.name, children=tuple(self.children))


def build_tree_with_stats(lines: Iterable[str]) -> tuple[DirectoryEntry, ParseStats]:
    """Replay prepared transcript lines into a directory tree.

    The stack holds the directories currently open; its top is where listed
    entries go. Every ``cd <name>`` opens a brand-new child, even when a
    listing or an earlier visit already produced one with that name. A
    directory is frozen into a ``DirectoryEntry`` when it is left, or at the
    end of the transcript for those still open.

    Args:
        lines: Trimmed, non-empty lines with the ``cd /`` header removed.

    Returns:
        The root directory and the parse counters.

    Raises:
        MalformedSizeError: If any file listing has an unparseable size.
    """
    stats = ParseStats()
    stack = [_OpenDirectory(ROOT_NAME)]

    def leave() -> None:
        closed = stack.pop()
        stack[-1].children[closed.slot] = closed.close()

    for line in lex_transcript(lines):
        stats.line_count += 1
        current = stack[-1]

        if isinstance(line, ListedFile):
            current.children.append(FileEntry(name=line.name, size=line.size))
            stats.file_count += 1
        elif isinstance(line, ListedDirectory):
            current.children.append(DirectoryEntry(name=line.name))
            stats.directory_count += 1
        elif isinstance(line, EnterDirectory):
            stack.append(_OpenDirectory(line.name, slot=len(current.children)))
            current.children.append(None)
            stats.directory_count += 1
        elif isinstance(line, LeaveDirectory):
            if len(stack) > 1:
                leave()
            else:
                logger.warning(
                    f"Ignoring 'cd ..' at the root (line {stats.line_count})"
                )
                stats.ignored_leave_count += 1
        elif isinstance(line, Unknown):
            logger.debug(f"Skipping line {stats.line_count}: {line.text!r}")
            stats.unknown_line_count += 1

    while len(stack) > 1:
        leave()
    root = stack[0].close()

    logger.info(
        f"Built directory tree from {stats.line_count} lines: "
        f"{stats.directory_count} directories, {stats.file_count} files"
    )
    return root, stats


def build_tree(lines: Iterable[str]) -> DirectoryEntry:
    """Replay prepared transcript lines and return the root directory."""
    root, _ = build_tree_with_stats(lines)
    return root


def parse_transcript(text: str, skip_header: bool = True) -> tuple[DirectoryEntry, ParseStats]:
    """Build a tree straight from raw transcript text.

    Args:
        text: Newline-separated transcript, header included.
        skip_header: Whether the first non-empty line is the ``cd /`` header.

    Returns:
        The root directory and the parse counters.
    """
    return build_tree_with_stats(prepare_lines(text, skip_header=skip_header))
