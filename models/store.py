"""In-memory registry of parsed directory trees."""

import logging
import threading
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from models.directory_tree import DirectoryEntry, ParseStats, parse_transcript

logger = logging.getLogger(__name__)


class TreeNotFoundError(LookupError):
    """Raised when a tree id is not in the store.

    Args:
        tree_id: The id that was requested.
        available_ids: Ids currently stored.
    """

    def __init__(self, tree_id: str, available_ids: list[str]):
        self.tree_id = tree_id
        self.available_ids = available_ids
        super().__init__(f"Tree '{tree_id}' not found")


class StoredTree(BaseModel):
    """A parsed tree together with where it came from.

    Args:
        tree_id: Unique identifier assigned on insert.
        created_at: When the transcript was parsed.
        root: Root directory of the tree.
        stats: Counters collected during the parse.
    """

    model_config = ConfigDict(frozen=True)

    tree_id: str = Field(default_factory=lambda: str(uuid4()))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    root: DirectoryEntry
    stats: ParseStats


class TreeStore:
    """Holds every tree parsed by this process, keyed by id.

    Trees are immutable once stored, so readers need no locking; the lock
    only serializes inserts and removals.
    """

    def __init__(self) -> None:
        self._trees: dict[str, StoredTree] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._trees)

    def __contains__(self, tree_id: object) -> bool:
        return tree_id in self._trees

    def add_transcript(self, text: str, skip_header: bool = True) -> StoredTree:
        """Parse a transcript and store the resulting tree.

        Nothing is stored when parsing fails.

        Raises:
            MalformedSizeError: If a listing has an unparseable size.
        """
        root, stats = parse_transcript(text, skip_header=skip_header)
        stored = StoredTree(root=root, stats=stats)
        with self._lock:
            self._trees[stored.tree_id] = stored
        logger.info(f"Stored tree {stored.tree_id} ({stats.line_count} lines)")
        return stored

    def get(self, tree_id: str) -> StoredTree:
        """Return a stored tree.

        Raises:
            TreeNotFoundError: If no tree has that id.
        """
        try:
            return self._trees[tree_id]
        except KeyError:
            raise TreeNotFoundError(tree_id, self.ids()) from None

    def remove(self, tree_id: str) -> StoredTree:
        """Remove and return a stored tree.

        Raises:
            TreeNotFoundError: If no tree has that id.
        """
        with self._lock:
            stored = self._trees.pop(tree_id, None)
        if stored is None:
            raise TreeNotFoundError(tree_id, self.ids())
        logger.info(f"Removed tree {tree_id}")
        return stored

    def ids(self) -> list[str]:
        return list(self._trees)

    def list_trees(self) -> list[StoredTree]:
        """Return stored trees, oldest first."""
        return sorted(self._trees.values(), key=lambda stored: stored.created_at)

    def clear(self) -> None:
        with self._lock:
            self._trees.clear()
