"""
Experiment runner: placement + optional persistence + reporting rows.

Persistence failures never discard a computed placement: the error is
logged and returned next to the result.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from .placement import PlacementConfig, PlacementResult, PlacementError, PersistenceError
from .placement.engine import PlacementEngine, ProgressCallback, SearchBackend
from .placement.metadata import Metadata
from .placement.topk import summarize_top_k, top_k
from .reporting import ExperimentRow, earth_movers_distance
from .storage import save_bins

logger = logging.getLogger(__name__)


@dataclass
class ExperimentOutcome:
    name: str
    result: PlacementResult
    emd: float
    saved_path: Optional[Path] = None
    persistence_error: Optional[PersistenceError] = None

    def row(self) -> ExperimentRow:
        return ExperimentRow(name=self.name, metadata=self.result.metadata, emd=self.emd)


def experiment_name(config: PlacementConfig) -> str:
    return (
        f"{config.policy.value}_k{config.k}_d{config.d}_bins{config.max_bins}"
        f"_fk{config.filter_k}_ml{config.max_load_factor}_mo{config.min_overlap_factor}"
    )


def run_experiment(
    config: PlacementConfig,
    search: SearchBackend,
    alphabet: Sequence[str],
    output_dir: Union[str, Path] = "results",
    name: Optional[str] = None,
    progress: Optional[ProgressCallback] = None
) -> ExperimentOutcome:
    """
    Run one placement and, if `config.save_result`, persist its bins.

    Raises:
        ConfigurationError / HashConversionError: run aborted
    """
    name = name or experiment_name(config)
    result = PlacementEngine(config, search, progress=progress).run(alphabet)
    outcome = ExperimentOutcome(name=name, result=result, emd=earth_movers_distance(result.bin_sizes()))

    if config.save_result:
        path = Path(output_dir) / f"{name}.json"
        try:
            outcome.saved_path = save_bins(result.bins, path)
        except PersistenceError as e:
            logger.error(f"Experiment {name}: {e}")
            outcome.persistence_error = e

    return outcome


def run_top_k_baseline(
    search: SearchBackend,
    alphabet: Sequence[str],
    k: int,
    filter_k: int
) -> ExperimentRow:
    """Top-K-only reference row (one bin per kept keyword)."""
    alphabet = list(alphabet)
    results = top_k(search, alphabet, k, filter_k)
    ignored = len(alphabet) - len(results)
    if not results:
        logger.warning("Top-K baseline kept no keywords")
        return ExperimentRow(name=f"top_k_k{k}", metadata=_empty_metadata(k, ignored), emd=0.0)

    metadata = summarize_top_k(results, k, ignored_keywords=ignored)
    sizes = [len(doc_ids) for doc_ids in results.values()]
    return ExperimentRow(name=f"top_k_k{k}", metadata=metadata, emd=earth_movers_distance(sizes))


def _empty_metadata(k: int, ignored: int) -> Metadata:
    return Metadata(
        k=k, num_bins=0, d=0, removed_items=0, total_items=0,
        average_load_per_bin=0, keywords_with_overlap=0,
        placed_keywords=0, ignored_keywords=ignored,
    )


def sweep_choices(
    base_config: PlacementConfig,
    search: SearchBackend,
    alphabet: Sequence[str],
    choices: Optional[Iterable[int]] = None,
    output_dir: Union[str, Path] = "results",
    progress: Optional[ProgressCallback] = None
) -> List[ExperimentOutcome]:
    """
    Repeat the experiment for each choice count (default 1..base_config.d).

    A configuration that is invalid for one choice count is logged and
    skipped; the sweep continues with the next one.
    """
    choices = list(choices) if choices is not None else list(range(1, base_config.d + 1))
    outcomes = []
    for d in choices:
        config = base_config.model_copy(update={"d": d})
        try:
            outcomes.append(run_experiment(config, search, alphabet, output_dir=output_dir, progress=progress))
        except PlacementError as e:
            logger.error(f"Experiment d={d} failed: {e}")
    return outcomes
