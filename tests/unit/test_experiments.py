"""
Unit tests for the experiment runner.
"""

import json
from unittest.mock import patch

from src.experiments import experiment_name, run_experiment, run_top_k_baseline, sweep_choices
from src.placement.config import PlacementConfig
from src.placement.errors import PersistenceError


def base_config(**overrides):
    values = dict(k=10, d=3, max_bins=4, filter_k=2)
    values.update(overrides)
    return PlacementConfig(**values)


class TestRunExperiment:
    """Placement plus optional persistence"""

    def test_no_save_by_default(self, overlapping_search, overlapping_alphabet, tmp_path):
        outcome = run_experiment(base_config(), overlapping_search, overlapping_alphabet, output_dir=tmp_path)
        assert outcome.saved_path is None
        assert outcome.persistence_error is None
        assert list(tmp_path.iterdir()) == []

    def test_saves_bins(self, overlapping_search, overlapping_alphabet, tmp_path):
        outcome = run_experiment(
            base_config(save_result=True), overlapping_search, overlapping_alphabet,
            output_dir=tmp_path, name="exp"
        )
        assert outcome.saved_path == tmp_path / "exp.json"
        saved = json.loads(outcome.saved_path.read_text())
        assert [set(ids) for ids in saved["bins"]] == outcome.result.bins

    def test_persistence_failure_keeps_result(self, overlapping_search, overlapping_alphabet, tmp_path):
        """A failed save is reported separately; the placement is still returned"""
        with patch("src.experiments.save_bins", side_effect=PersistenceError("x.json", "disk full")):
            outcome = run_experiment(
                base_config(save_result=True), overlapping_search, overlapping_alphabet, output_dir=tmp_path
            )

        assert isinstance(outcome.persistence_error, PersistenceError)
        assert outcome.saved_path is None
        assert outcome.result.metadata.placed_keywords == 6

    def test_row(self, overlapping_search, overlapping_alphabet):
        outcome = run_experiment(base_config(), overlapping_search, overlapping_alphabet, name="exp")
        row = outcome.row()
        assert row.name == "exp"
        assert row.metadata == outcome.result.metadata
        assert row.emd == outcome.emd

    def test_experiment_name(self):
        name = experiment_name(base_config(policy="max_load", max_load_factor=1))
        assert name == "max_load_k10_d3_bins4_fk2_ml1_mo0"


class TestBaseline:

    def test_top_k_row(self, overlapping_search, overlapping_alphabet):
        row = run_top_k_baseline(overlapping_search, overlapping_alphabet, k=10, filter_k=2)
        assert row.metadata.num_bins == 6
        assert row.metadata.ignored_keywords == 2
        assert row.metadata.removed_items == 0

    def test_nothing_kept(self, overlapping_search, overlapping_alphabet):
        row = run_top_k_baseline(overlapping_search, overlapping_alphabet, k=10, filter_k=50)
        assert row.metadata.num_bins == 0
        assert row.metadata.ignored_keywords == len(overlapping_alphabet)


class TestSweep:

    def test_one_outcome_per_choice_count(self, overlapping_search, overlapping_alphabet):
        outcomes = sweep_choices(base_config(d=4), overlapping_search, overlapping_alphabet)
        assert [outcome.result.metadata.d for outcome in outcomes] == [1, 2, 3, 4]

    def test_explicit_choices(self, overlapping_search, overlapping_alphabet):
        outcomes = sweep_choices(base_config(), overlapping_search, overlapping_alphabet, choices=[2, 5])
        assert [outcome.result.metadata.d for outcome in outcomes] == [2, 5]

    def test_invalid_choice_count_skipped(self, overlapping_search, overlapping_alphabet):
        """Strict factors reject small d; the sweep moves on"""
        config = base_config(d=3, min_overlap_factor=1, max_load_factor=1, strict_factors=True)
        outcomes = sweep_choices(config, overlapping_search, overlapping_alphabet)
        assert [outcome.result.metadata.d for outcome in outcomes] == [3]
