"""
Unit tests for the placement engine.
"""

import pytest

from src.placement.config import PlacementConfig
from src.placement.engine import PlacementEngine, place_keywords, result_ids
from src.placement.errors import ConfigurationError
from src.placement.hashing import candidate_bins

KEPT = {"apple", "banana", "cherry", "date", "elder", "grape"}
KEPT_TOTAL = 22  # Sum of kept result-set sizes in overlapping_results


def config(**overrides):
    values = dict(k=10, d=3, max_bins=4, filter_k=2)
    values.update(overrides)
    return PlacementConfig(**values)


ALL_MODES = [
    dict(policy="max_overlap"),
    dict(policy="max_load", max_load_factor=1),
    dict(policy="two_factor", min_overlap_factor=1, max_load_factor=1),
    dict(policy="two_factor", min_overlap_factor=1, evaluation="two_pass"),
    dict(policy="max_overlap", evaluation="two_pass"),
]


class TestResultIds:
    """Top-k id extraction"""

    def test_truncates_to_k(self, fake_search_factory):
        search = fake_search_factory({"sky": [5, 6, 7, 8]})
        assert result_ids(search, "sky", 2) == frozenset({5, 6})

    def test_unknown_keyword(self, fake_search_factory):
        assert result_ids(fake_search_factory({}), "sky", 3) == frozenset()


class TestFilterThreshold:
    """Keywords below filter_k are skipped"""

    def test_exact_threshold(self, fake_search_factory):
        """filter_k - 1 results excluded, exactly filter_k included"""
        search = fake_search_factory({"short": [1, 2], "exact": [1, 2, 3]})
        result = PlacementEngine(config(filter_k=3, max_bins=2), search).run(["exact", "short"])

        assert set(result.assignments) == {"exact"}
        assert result.metadata.ignored_keywords == 1
        assert result.metadata.placed_keywords == 1

    def test_ignored_keywords_contribute_nothing(self, overlapping_search, overlapping_alphabet):
        result = place_keywords(config(), overlapping_search, overlapping_alphabet)
        assert "fig" not in result.assignments
        assert "honeydew" not in result.assignments
        assert result.metadata.ignored_keywords == 2


class TestPlacement:
    """Assign stage behaviour"""

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_conservation(self, overlapping_search, overlapping_alphabet, mode):
        """Every kept (keyword, id) pair is either a bin item or a counted duplicate"""
        result = place_keywords(config(**mode), overlapping_search, overlapping_alphabet)
        metadata = result.metadata
        assert metadata.total_items + metadata.removed_items == KEPT_TOTAL
        assert set(result.assignments) == KEPT

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_determinism(self, overlapping_results, fake_search_factory, overlapping_alphabet, mode):
        first = place_keywords(config(**mode), fake_search_factory(overlapping_results), overlapping_alphabet)
        second = place_keywords(config(**mode), fake_search_factory(overlapping_results), overlapping_alphabet)
        assert first.bins == second.bins
        assert first.metadata == second.metadata
        assert first.assignments == second.assignments

    def test_assigned_bin_is_a_candidate(self, overlapping_search, overlapping_alphabet):
        cfg = config(d=4, max_bins=8)
        result = place_keywords(cfg, overlapping_search, overlapping_alphabet)
        for keyword, index in result.assignments.items():
            assert index in candidate_bins(keyword, cfg.d, cfg.max_bins)

    def test_bins_only_hold_result_ids(self, overlapping_results, overlapping_search, overlapping_alphabet):
        result = place_keywords(config(), overlapping_search, overlapping_alphabet)
        known = {doc_id for ids in overlapping_results.values() for doc_id in ids}
        for contents in result.bins:
            assert contents <= known

    def test_keyword_ids_are_in_its_bin(self, overlapping_results, overlapping_search, overlapping_alphabet):
        result = place_keywords(config(), overlapping_search, overlapping_alphabet)
        for keyword, index in result.assignments.items():
            assert set(overlapping_results[keyword]) <= result.bins[index]

    def test_single_bin_counts_every_duplicate(self, overlapping_search, overlapping_alphabet):
        """With one bin every repeated id is a removed duplicate"""
        result = place_keywords(config(max_bins=1), overlapping_search, overlapping_alphabet)
        assert result.bin_sizes() == [13]
        assert result.metadata.removed_items == 9
        assert result.metadata.keywords_with_overlap == 4
        assert result.metadata.average_load_per_bin == 13

    def test_bin_count(self, overlapping_search, overlapping_alphabet):
        result = place_keywords(config(max_bins=7), overlapping_search, overlapping_alphabet)
        assert len(result.bins) == 7
        assert result.metadata.num_bins == 7


class TestEngineLifecycle:
    """Init, progress, early stop and validation"""

    def test_zero_bins_rejected_up_front(self, overlapping_search):
        with pytest.raises(ConfigurationError):
            PlacementEngine(config(max_bins=0), overlapping_search)

    def test_progress_called_once_per_keyword(self, overlapping_search, overlapping_alphabet):
        seen = []
        place_keywords(config(), overlapping_search, overlapping_alphabet, progress=seen.append)
        assert seen == overlapping_alphabet

    def test_two_pass_queries_each_keyword_once(self, overlapping_search, overlapping_alphabet):
        place_keywords(config(evaluation="two_pass"), overlapping_search, overlapping_alphabet)
        assert sorted(overlapping_search.calls) == overlapping_alphabet

    def test_early_stop_leaves_valid_partial_state(self, overlapping_search, overlapping_alphabet):
        engine = PlacementEngine(config(max_bins=1), overlapping_search)
        placements = engine.assign_iter(overlapping_alphabet)
        first = next(placements)
        second = next(placements)

        assert (first.keyword, second.keyword) == ("apple", "banana")
        assert engine.bins == [{0, 1, 2, 3, 4, 5}]

        partial = engine.finalize()
        assert partial.metadata.placed_keywords == 2
        assert partial.metadata.removed_items == 2

    def test_run_resets_state(self, overlapping_search, overlapping_alphabet):
        engine = PlacementEngine(config(), overlapping_search)
        first = engine.run(overlapping_alphabet)
        second = engine.run(overlapping_alphabet)
        assert first.metadata == second.metadata
        assert first.bins == second.bins

    def test_two_pass_requires_precompute(self, overlapping_search):
        engine = PlacementEngine(config(evaluation="two_pass"), overlapping_search)
        with pytest.raises(RuntimeError):
            engine.place("apple", frozenset({1, 2}))

    def test_fallback_still_places_every_keyword(self, overlapping_search, overlapping_alphabet):
        """Factors that remove all d candidates fall back instead of failing"""
        cfg = config(d=2, min_overlap_factor=1, max_load_factor=1)
        engine = PlacementEngine(cfg, overlapping_search)
        result = engine.run(overlapping_alphabet)
        assert set(result.assignments) == KEPT
        assert engine.selector.fallbacks == len(KEPT)

    def test_strict_factors_abort(self, overlapping_search):
        cfg = config(d=2, min_overlap_factor=1, max_load_factor=1, strict_factors=True)
        with pytest.raises(ConfigurationError):
            PlacementEngine(cfg, overlapping_search)

    def test_finalized_result_is_not_live(self, overlapping_search, overlapping_alphabet):
        """Placements after finalize() do not change a result already returned"""
        engine = PlacementEngine(config(max_bins=1), overlapping_search)
        placements = engine.assign_iter(overlapping_alphabet)
        next(placements)
        partial = engine.finalize()
        snapshot = [set(contents) for contents in partial.bins]

        for _ in placements:
            pass

        assert partial.bins == snapshot
        assert partial.bins != engine.bins
