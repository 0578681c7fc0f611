"""
Command-line driver for d-choice placement experiments.

Pipeline:
1. Load a JSON-lines corpus
2. Build the keyword alphabet and a BM25 search engine
3. Run the Top-K-only baseline
4. Run the placement experiment (or a sweep over d = 1..d)
5. Print a comparison table and write bin histograms

Usage:
    python -m src.main --file corpus.jsonl -k 10 -d 10 --filter-k 2
    python -m src.main --file corpus.jsonl --policy max_load --max-load-factor 2 --sweep
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError
from tqdm import tqdm

from src.bm25 import BM25SearchEngine, Language, get_alphabet
from src.dataloader import load_corpus
from src.experiments import run_experiment, run_top_k_baseline, sweep_choices
from src.logging_config import setup_logging
from src.placement import EvaluationMode, PlacementConfig, PlacementError, SelectionPolicy
from src.reporting import fullness_histogram, print_table

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent


def load_environment():
    """Load .env.local (highest priority), then .env as fallback."""
    env_local = PROJECT_ROOT / ".env.local"
    env_file = PROJECT_ROOT / ".env"
    if env_local.exists():
        load_dotenv(env_local, override=True)
    elif env_file.exists():
        load_dotenv(env_file, override=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Place per-keyword BM25 top-k result sets into bins with d-choice hashing"
    )
    parser.add_argument("-f", "--file", required=True, help="Path to the JSON-lines corpus")
    parser.add_argument("--key", default="text", help="JSON field holding the document text (default: text)")
    parser.add_argument("-k", type=int, default=None, help="Results per keyword (top-k)")
    parser.add_argument("-d", type=int, default=None, help="Number of hash choices")
    parser.add_argument("--filter-k", type=int, default=None, help="Discard keywords with fewer results than this")
    parser.add_argument("--max-bins", type=int, default=None, help="Number of bins (default: documents / 100)")
    parser.add_argument("--max-load-factor", type=int, default=None, help="Fullest candidates dropped before selection")
    parser.add_argument("--min-overlap-factor", type=int, default=None, help="Lowest-overlap candidates dropped before selection")
    parser.add_argument("--policy", choices=[p.value for p in SelectionPolicy], default=None)
    parser.add_argument("--evaluation", choices=[m.value for m in EvaluationMode], default=None)
    parser.add_argument("--strict-factors", action="store_true", default=None,
                        help="Fail instead of falling back when factors exclude every candidate")
    parser.add_argument("--language", choices=[lang.value for lang in Language], default=Language.ENGLISH.value)
    parser.add_argument("--strip-numbers", action="store_true", help="Remove numbers from documents before indexing")
    parser.add_argument("--save-result", action="store_true", default=None, help="Write bins as JSON")
    parser.add_argument("--output-dir", default="results", help="Directory for bins and histograms")
    parser.add_argument("--sweep", action="store_true", help="Run every choice count from 1 to d")
    parser.add_argument("--no-plots", action="store_true", help="Skip histogram rendering")
    parser.add_argument("--log-file", default="logs/bm25-bins.log", help="Session log base path ('' to disable)")
    return parser


def default_max_bins(document_count: int) -> int:
    return max(document_count // 100, 1)


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    args = build_parser().parse_args(argv)

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    setup_logging(log_file=args.log_file or None, console_level=getattr(logging, log_level, logging.INFO))

    logger.info("Starting BM25 placement experiment")
    try:
        corpus = load_corpus(args.file, args.key, strip_numbers=args.strip_numbers)
    except (OSError, ValueError) as e:
        logger.error(f"Unable to load corpus: {e}")
        return 1

    language = Language(args.language)
    alphabet = get_alphabet(corpus, language)
    logger.info(f"The total number of documents is {len(corpus)} and the alphabet size is {len(alphabet)}")

    try:
        config = PlacementConfig.from_env(
            k=args.k,
            d=args.d,
            max_bins=args.max_bins if args.max_bins is not None else (
                None if os.getenv("BINS_MAX_BINS") else default_max_bins(len(corpus))
            ),
            filter_k=args.filter_k,
            max_load_factor=args.max_load_factor,
            min_overlap_factor=args.min_overlap_factor,
            policy=args.policy,
            evaluation=args.evaluation,
            strict_factors=args.strict_factors,
            save_result=args.save_result,
        )
        # Fail before the baseline runs; each engine logs its own warnings
        config.ensure_valid(warn=False)
    except (ValidationError, PlacementError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    search = BM25SearchEngine(corpus, language)

    rows = [run_top_k_baseline(search, alphabet, config.k, config.filter_k)]
    logger.info("Top K Done")

    runs = config.d if args.sweep else 1
    with tqdm(total=len(alphabet) * runs, desc="Placing keywords", unit="kw") as bar:
        def progress(keyword: str):
            bar.update(1)

        try:
            if args.sweep:
                outcomes = sweep_choices(config, search, alphabet, output_dir=args.output_dir, progress=progress)
            else:
                outcomes = [run_experiment(config, search, alphabet, output_dir=args.output_dir, progress=progress)]
        except PlacementError as e:
            logger.error(f"Placement failed: {e}")
            return 2

    failures = 0
    for outcome in outcomes:
        rows.append(outcome.row())
        if outcome.persistence_error is not None:
            failures += 1
        if not args.no_plots:
            try:
                fullness_histogram(outcome.result.bins, outcome.name, output_dir=args.output_dir)
            except OSError as e:
                logger.error(f"Unable to write histogram for {outcome.name}: {e}")

    print_table(rows)

    if failures:
        logger.error(f"{failures} experiment(s) could not be saved")
        return 3
    return 0


if __name__ == "__main__":
    sys.exit(main())
