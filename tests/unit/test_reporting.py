"""
Unit tests for reporting helpers.
"""

import pytest
from src.placement.metadata import summarize
from src.reporting import (
    ExperimentRow, TABLE_COLUMNS, consolidate_bins, earth_movers_distance, format_table, fullness_histogram
)


class TestConsolidateBins:

    def test_groups(self):
        assert consolidate_bins([1, 2, 3, 4, 5], granularity=2) == [(0, 6), (1, 9)]

    def test_fewer_bins_than_granularity(self):
        assert consolidate_bins([4, 1], granularity=30) == [(0, 4), (1, 1)]

    def test_sorted(self):
        assert consolidate_bins([1, 5, 3], granularity=3, sort=True) == [(0, 5), (1, 3), (2, 1)]

    def test_empty(self):
        assert consolidate_bins([], granularity=5) == []

    def test_invalid_granularity(self):
        with pytest.raises(ValueError):
            consolidate_bins([1], granularity=0)


class TestEarthMoversDistance:

    def test_balanced(self):
        assert earth_movers_distance([5, 5, 5, 5]) == 0.0

    def test_all_in_one_of_two(self):
        assert earth_movers_distance([4, 0]) == pytest.approx(0.5)

    def test_order_independent(self):
        assert earth_movers_distance([0, 9, 1]) == pytest.approx(earth_movers_distance([9, 1, 0]))

    def test_more_skew_is_larger(self):
        assert earth_movers_distance([10, 0, 0, 0]) > earth_movers_distance([4, 3, 2, 1])

    def test_empty_and_zero(self):
        assert earth_movers_distance([]) == 0.0
        assert earth_movers_distance([0, 0]) == 0.0


class TestTable:

    def test_columns_and_rows(self):
        metadata = summarize([{1, 2}, {3}], k=4, d=2, removed_items=3, keywords_with_overlap=1)
        table = format_table([ExperimentRow(name="two_factor_d2", metadata=metadata, emd=0.25)])

        lines = table.splitlines()
        for header in TABLE_COLUMNS:
            assert header in lines[1]
        assert "two_factor_d2" in lines[3]
        assert "0.2500" in lines[3]
        assert len({len(line) for line in lines}) == 1  # Fixed width


class TestHistogram:

    def test_writes_png(self, tmp_path):
        pytest.importorskip("matplotlib")
        path = fullness_histogram([{1, 2}, {3}, set()], "exp", output_dir=tmp_path, granularity=2)
        assert path == tmp_path / "exp_histogram.png"
        assert path.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
