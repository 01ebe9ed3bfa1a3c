"""Tests for utility functions.

Tests for: chunk_children.
"""

import pytest

from larkify.utils.chunk import chunk_children

# =========================================================================
# chunk_children tests
# =========================================================================

class TestChunkChildren:
    """Tests for chunk_children utility."""

    def test_empty_list(self):
        assert chunk_children([]) == []

    def test_under_limit(self):
        blocks = [{"block_type": 2}] * 20
        assert [len(b) for b in chunk_children(blocks)] == [20]

    def test_at_limit(self):
        blocks = [{"block_type": 2}] * 50
        assert [len(b) for b in chunk_children(blocks)] == [50]

    def test_over_limit(self):
        blocks = [{"block_type": 2}] * 130
        assert [len(b) for b in chunk_children(blocks)] == [50, 50, 30]

    def test_custom_size(self):
        blocks = [{"block_type": 2}] * 7
        assert [len(b) for b in chunk_children(blocks, size=3)] == [3, 3, 1]

    def test_order_preserved(self):
        blocks = [{"i": i} for i in range(120)]
        flat = [b["i"] for batch in chunk_children(blocks) for b in batch]
        assert flat == list(range(120))

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunk_children([{"block_type": 2}], size=0)
