"""Unit tests for merging provider results."""

import pytest

from src.torwiz.search.aggregate import merge, seeds_key
from src.torwiz.search.models import TorrentRecord


def _record(title, seeds=None, provider="tpb"):
    return TorrentRecord(
        title=title, provider=provider, magnet_ref={}, seeds=seeds
    )


class TestMerge:
    """Test cases for merge function."""

    def test_ranks_across_providers_by_seeds(self):
        a = [_record("a5", 5, "a"), _record("a1", 1, "a")]
        b = [_record("b10", 10, "b"), _record("b3", 3, "b")]

        merged = merge([a, b], 10)

        assert [r.seeds for r in merged] == [10, 5, 3, 1]

    def test_missing_seeds_rank_as_zero(self):
        merged = merge([[_record("none"), _record("one", 1)]], 10)
        assert [r.title for r in merged] == ["one", "none"]

    def test_ties_keep_arrival_order(self):
        first = [_record("x", 4, "a"), _record("y", 0, "a")]
        second = [_record("z", 4, "b"), _record("w", None, "b")]

        merged = merge([first, second], 10)

        assert [r.title for r in merged] == ["x", "z", "y", "w"]

    @pytest.mark.parametrize("row_limit", [0, 1, 3, 100])
    def test_output_never_exceeds_row_limit(self, row_limit):
        results = [[_record(str(i), i) for i in range(5)]] * 2

        merged = merge(results, row_limit)

        assert len(merged) <= row_limit
        assert len(merged) == min(row_limit, 10)

    def test_output_sorted_descending(self):
        results = [
            [_record("a", 3), _record("b", 9)],
            [_record("c", None), _record("d", 7), _record("e", 3)],
        ]

        keys = [seeds_key(r) for r in merge(results, 10)]

        assert keys == sorted(keys)

    def test_empty(self):
        assert merge([], 5) == []
        assert merge([[], []], 5) == []
