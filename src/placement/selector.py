"""
Bin selection policies for d-choice placement.

All policies are built from two stable filtering primitives:

    drop_lowest_by(candidates, key, n)   -> remove the n smallest by key
    drop_highest_by(candidates, key, n)  -> remove the n largest by key

and a final pick of the maximum-overlap survivor (ties go to the lowest
hash choice).

Policies:
- MAX_OVERLAP: pick across all d candidates
- MAX_LOAD:    drop the max_load_factor fullest bins, then pick
- TWO_FACTOR:  drop the min_overlap_factor lowest-overlap candidates,
               then the max_load_factor fullest, then pick

If filtering removes every candidate, the maximum-overlap candidate of the
unfiltered list is returned.
"""

import logging
from typing import Callable, List, Sequence

from .candidates import Candidate
from .config import PlacementConfig, SelectionPolicy

logger = logging.getLogger(__name__)

CandidateKey = Callable[[Candidate], int]


def by_overlap(candidate: Candidate) -> int:
    return candidate.overlap


def by_load(candidate: Candidate) -> int:
    return candidate.bin_size


def drop_lowest_by(candidates: Sequence[Candidate], key: CandidateKey, n: int) -> List[Candidate]:
    """
    Sort ascending by `key` (stable) and drop the first `n`.

    Returns a new list; the input is never mutated.
    """
    ranked = sorted(candidates, key=key)
    return ranked[max(n, 0):]


def drop_highest_by(candidates: Sequence[Candidate], key: CandidateKey, n: int) -> List[Candidate]:
    """
    Sort descending by `key` (stable) and drop the first `n`.

    Returns a new list; the input is never mutated.
    """
    ranked = sorted(candidates, key=key, reverse=True)
    return ranked[max(n, 0):]


def pick_max_overlap(candidates: Sequence[Candidate]) -> Candidate:
    """Maximum overlap; ties go to the lowest choice index."""
    return min(candidates, key=lambda c: (-c.overlap, c.choice))


class BinSelector:
    """
    Chooses one destination bin from a keyword's candidates.

    Example:
        >>> selector = BinSelector(SelectionPolicy.TWO_FACTOR, max_load_factor=1, min_overlap_factor=1)
        >>> candidates = [
        ...     Candidate(choice=0, bin_index=3, bin_size=10, overlap=4),
        ...     Candidate(choice=1, bin_index=1, bin_size=2, overlap=0),
        ...     Candidate(choice=2, bin_index=0, bin_size=5, overlap=2),
        ... ]
        >>> selector.select(candidates).bin_index
        0
    """

    def __init__(
        self,
        policy: SelectionPolicy = SelectionPolicy.TWO_FACTOR,
        max_load_factor: int = 0,
        min_overlap_factor: int = 0
    ):
        self.policy = policy
        self.max_load_factor = max_load_factor
        self.min_overlap_factor = min_overlap_factor
        self.fallbacks = 0  # Selections where filtering left nothing

    @classmethod
    def from_config(cls, config: PlacementConfig) -> "BinSelector":
        return cls(
            policy=config.policy,
            max_load_factor=config.max_load_factor,
            min_overlap_factor=config.min_overlap_factor,
        )

    def filter(self, candidates: Sequence[Candidate]) -> List[Candidate]:
        """Apply the policy's exclusions; may return an empty list."""
        if self.policy == SelectionPolicy.MAX_OVERLAP:
            return list(candidates)

        if self.policy == SelectionPolicy.MAX_LOAD:
            return drop_highest_by(candidates, by_load, self.max_load_factor)

        # TWO_FACTOR
        remaining = drop_lowest_by(candidates, by_overlap, self.min_overlap_factor)
        remaining = sorted(remaining, key=by_overlap, reverse=True)
        return drop_highest_by(remaining, by_load, self.max_load_factor)

    def select(self, candidates: Sequence[Candidate]) -> Candidate:
        """
        Pick the destination candidate.

        Raises:
            ValueError: no candidates at all (d == 0)
        """
        if not candidates:
            raise ValueError("Cannot select a bin from an empty candidate list")

        survivors = self.filter(candidates)
        if not survivors:
            self.fallbacks += 1
            chosen = pick_max_overlap(candidates)
            logger.debug(
                f"Policy {self.policy.value} filtered all {len(candidates)} candidates; "
                f"falling back to bin {chosen.bin_index} (overlap={chosen.overlap})"
            )
            return chosen

        return pick_max_overlap(survivors)
