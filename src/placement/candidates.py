"""
Candidate evaluation for d-choice placement.

For one keyword's document-ID set, every hash choice yields a Candidate
(bin index, current bin size, overlap with the set being placed).

Two measurement sources are supported:
- single pass: the bins accumulated so far (later keywords see earlier placements)
- two pass: PotentialContents, the ids every eligible keyword *could* put in
  each bin, built before any placement so overlap does not depend on order
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import AbstractSet, Dict, Iterable, List, Sequence, Tuple

from .hashing import candidate_bins

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Candidate:
    """One hash choice for a keyword"""
    choice: int      # Hash choice index that produced this candidate
    bin_index: int   # Target bin
    bin_size: int    # Load: current number of ids in the bin
    overlap: int     # Ids shared with the set being placed


class PotentialContents:
    """
    Per-bin multiset of ids that eligible keywords could place there.

    Each keyword contributes its ids once to every *distinct* candidate bin,
    so its own contribution can be subtracted when it is measured.
    """

    def __init__(self):
        self._counts: Dict[int, Counter] = defaultdict(Counter)

    def add(self, doc_ids: Iterable[int], bins: Iterable[int]):
        """Record that `doc_ids` may be placed into any of `bins`."""
        ids = list(doc_ids)
        for index in set(bins):
            self._counts[index].update(ids)

    def shared_overlap(self, index: int, doc_ids: AbstractSet[int]) -> int:
        """
        Ids of `doc_ids` that at least one *other* keyword could also place in `index`.

        Assumes `doc_ids` was itself added with `index` among its bins.
        """
        counts = self._counts.get(index)
        if not counts:
            return 0
        return sum(1 for doc_id in doc_ids if counts.get(doc_id, 0) > 1)


def build_potential_contents(
    archived: Sequence[Tuple[str, AbstractSet[int]]],
    d: int,
    max_bins: int
) -> PotentialContents:
    """
    First pass of the two-pass evaluator.

    Args:
        archived: (keyword, document-ID set) for every eligible keyword
        d: Number of hash choices
        max_bins: Number of bins

    Returns:
        PotentialContents covering all candidate bins of all keywords
    """
    potential = PotentialContents()
    for keyword, doc_ids in archived:
        potential.add(doc_ids, candidate_bins(keyword, d, max_bins))
    logger.debug(f"Precomputed potential contents for {len(archived)} keywords over {max_bins} bins")
    return potential


def evaluate_candidates(
    keyword: str,
    doc_ids: AbstractSet[int],
    bins: Sequence[AbstractSet[int]],
    d: int
) -> List[Candidate]:
    """Single-pass evaluation against the current bin contents."""
    candidates = []
    for choice, index in enumerate(candidate_bins(keyword, d, len(bins))):
        contents = bins[index]
        candidates.append(Candidate(
            choice=choice,
            bin_index=index,
            bin_size=len(contents),
            overlap=len(contents & doc_ids),
        ))
    return candidates


def evaluate_candidates_two_pass(
    keyword: str,
    doc_ids: AbstractSet[int],
    bins: Sequence[AbstractSet[int]],
    potential: PotentialContents,
    d: int
) -> List[Candidate]:
    """
    Second pass: overlap from PotentialContents, load from the real bins.
    """
    candidates = []
    for choice, index in enumerate(candidate_bins(keyword, d, len(bins))):
        candidates.append(Candidate(
            choice=choice,
            bin_index=index,
            bin_size=len(bins[index]),
            overlap=potential.shared_overlap(index, doc_ids),
        ))
    return candidates
