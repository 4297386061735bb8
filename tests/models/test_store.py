"""Unit tests for the in-memory TreeStore."""

import pytest

from models.store import StoredTree, TreeNotFoundError, TreeStore
from models.transcript import MalformedSizeError
from tests.fixtures.transcripts import SAMPLE_TOTAL_SIZE, SAMPLE_TRANSCRIPT


class TestTreeStore:
    """Test storing, fetching and removing trees."""

    def test_starts_empty(self, fresh_store):
        assert len(fresh_store) == 0
        assert fresh_store.list_trees() == []

    def test_add_transcript(self, fresh_store):
        stored = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)

        assert isinstance(stored, StoredTree)
        assert stored.tree_id in fresh_store
        assert stored.root.size() == SAMPLE_TOTAL_SIZE
        assert stored.stats.file_count == 10

    def test_ids_are_unique(self, fresh_store):
        first = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)
        second = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)

        assert first.tree_id != second.tree_id
        assert len(fresh_store) == 2

    def test_get_returns_same_tree(self, fresh_store):
        stored = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)
        assert fresh_store.get(stored.tree_id) is stored

    def test_get_unknown_raises(self, fresh_store):
        stored = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)

        with pytest.raises(TreeNotFoundError) as exc_info:
            fresh_store.get("missing")

        assert exc_info.value.tree_id == "missing"
        assert exc_info.value.available_ids == [stored.tree_id]

    def test_remove(self, fresh_store):
        stored = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)

        assert fresh_store.remove(stored.tree_id) is stored
        assert stored.tree_id not in fresh_store

        with pytest.raises(TreeNotFoundError):
            fresh_store.remove(stored.tree_id)

    def test_malformed_transcript_stores_nothing(self, fresh_store):
        with pytest.raises(MalformedSizeError):
            fresh_store.add_transcript("$ cd /\n$ ls\n² bad\n")

        assert len(fresh_store) == 0

    def test_list_oldest_first(self, fresh_store):
        first = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)
        second = fresh_store.add_transcript("$ cd /\n$ ls\n")

        assert [s.tree_id for s in fresh_store.list_trees()] == [first.tree_id, second.tree_id]

    def test_clear(self, fresh_store):
        fresh_store.add_transcript(SAMPLE_TRANSCRIPT)
        fresh_store.clear()
        assert len(fresh_store) == 0

    def test_independent_parses(self, fresh_store):
        """Each upload owns its own tree."""
        first = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)
        second = fresh_store.add_transcript(SAMPLE_TRANSCRIPT)

        assert first.root is not second.root


def test_new_store_is_independent():
    assert len(TreeStore()) == 0
