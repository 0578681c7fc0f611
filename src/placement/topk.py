"""
Top-K-only baseline: every kept keyword gets its own result set.

No hashing and no bins are shared, so nothing is consolidated; the result is
the zero-collision reference the binned runs are compared against.
"""

import logging
from typing import Dict, FrozenSet, Iterable, Mapping

from .engine import SearchBackend, result_ids
from .metadata import Metadata, summarize

logger = logging.getLogger(__name__)


def top_k(
    search: SearchBackend,
    alphabet: Iterable[str],
    k: int,
    filter_k: int
) -> Dict[str, FrozenSet[int]]:
    """
    Map each keyword with at least `filter_k` results to its top-k id set.
    """
    results: Dict[str, FrozenSet[int]] = {}
    ignored = 0
    for keyword in alphabet:
        doc_ids = result_ids(search, keyword, k)
        if len(doc_ids) < filter_k:
            ignored += 1
            continue
        results[keyword] = doc_ids

    logger.info(f"Top-K baseline: {len(results)} keywords kept, {ignored} ignored (k={k}, filter_k={filter_k})")
    return results


def summarize_top_k(results: Mapping[str, FrozenSet[int]], k: int, ignored_keywords: int = 0) -> Metadata:
    """Metadata for the baseline, one bin per kept keyword."""
    return summarize(
        list(results.values()),
        k=k,
        d=0,
        removed_items=0,
        keywords_with_overlap=0,
        placed_keywords=len(results),
        ignored_keywords=ignored_keywords,
    )
