"""
Placement engine: runs d-choice placement over a keyword alphabet.

Lifecycle of one run:
1. Init       - max_bins empty bins, zeroed counters
2. Precompute - (two-pass only) fetch every eligible keyword's ids once and
                build the potential-contents table
3. Assign     - for each eligible keyword in alphabet order:
                evaluate candidates -> select bin -> union ids into bin
4. Finalize   - summarize bins and counters into Metadata

Assign is exposed as a generator (`assign_iter`) so a caller can stop
between keywords; the bins are always a valid partial placement.
"""

import logging
from dataclasses import dataclass, field
from typing import (
    Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Protocol, Sequence, Set, Tuple
)

from .candidates import (
    Candidate, PotentialContents, build_potential_contents,
    evaluate_candidates, evaluate_candidates_two_pass
)
from .config import EvaluationMode, PlacementConfig
from .metadata import Metadata, summarize
from .selector import BinSelector

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class SearchHitLike(Protocol):
    document_id: int


class SearchBackend(Protocol):
    """Anything that returns ranked hits for a query (e.g. BM25SearchEngine)"""

    def search(self, query: str, limit: int) -> Sequence[SearchHitLike]:
        ...


@dataclass(frozen=True)
class Placement:
    """Decision taken for one keyword"""
    keyword: str
    bin_index: int
    candidate: Candidate
    duplicates: int  # Ids already present in the bin before the union


@dataclass
class PlacementResult:
    bins: List[Set[int]]
    metadata: Metadata
    assignments: Dict[str, int] = field(default_factory=dict)

    def bin_sizes(self) -> List[int]:
        return [len(contents) for contents in self.bins]


def result_ids(search: SearchBackend, keyword: str, k: int) -> FrozenSet[int]:
    """Document-ID set of a keyword's top-k search result."""
    hits = search.search(keyword, k)
    return frozenset(hit.document_id for hit in list(hits)[:k])


class PlacementEngine:
    """
    Places every eligible keyword's top-k result set into one of max_bins bins.

    Args:
        config: Placement configuration (validated on construction)
        search: Search backend queried once per keyword
        progress: Optional callable invoked with each keyword as it is fetched
    """

    def __init__(
        self,
        config: PlacementConfig,
        search: SearchBackend,
        progress: Optional[ProgressCallback] = None
    ):
        self.config = config.ensure_valid()
        self.search = search
        self.progress = progress
        self.selector = BinSelector.from_config(config)
        self.reset()

    def reset(self):
        """Init state: empty bins and zeroed counters."""
        self.bins: List[Set[int]] = [set() for _ in range(self.config.max_bins)]
        self.assignments: Dict[str, int] = {}
        self.potential: Optional[PotentialContents] = None
        self.removed_items = 0
        self.keywords_with_overlap = 0
        self.ignored_keywords = 0
        self.selector.fallbacks = 0

    def fetch(self, keyword: str) -> Optional[FrozenSet[int]]:
        """
        Fetch a keyword's document-ID set, or None if it is below filter_k.
        """
        if self.progress is not None:
            self.progress(keyword)

        doc_ids = result_ids(self.search, keyword, self.config.k)
        if len(doc_ids) < self.config.filter_k:
            self.ignored_keywords += 1
            logger.debug(f"Ignoring '{keyword}': {len(doc_ids)} results < filter_k={self.config.filter_k}")
            return None
        return doc_ids

    def eligible(self, alphabet: Iterable[str]) -> Iterator[Tuple[str, FrozenSet[int]]]:
        """Yield (keyword, ids) for keywords that pass filter_k."""
        for keyword in alphabet:
            doc_ids = self.fetch(keyword)
            if doc_ids is not None:
                yield keyword, doc_ids

    def precompute(self, alphabet: Iterable[str]) -> List[Tuple[str, FrozenSet[int]]]:
        """
        Two-pass first stage: archive eligible results and build potential contents.

        Does not touch the real bins.
        """
        archived = list(self.eligible(alphabet))
        self.potential = build_potential_contents(archived, self.config.d, self.config.max_bins)
        return archived

    def evaluate(self, keyword: str, doc_ids: FrozenSet[int]) -> List[Candidate]:
        if self.config.evaluation == EvaluationMode.TWO_PASS:
            if self.potential is None:
                raise RuntimeError("Two-pass evaluation requires precompute() first")
            return evaluate_candidates_two_pass(keyword, doc_ids, self.bins, self.potential, self.config.d)
        return evaluate_candidates(keyword, doc_ids, self.bins, self.config.d)

    def place(self, keyword: str, doc_ids: FrozenSet[int]) -> Placement:
        """Evaluate, select and union one keyword's ids into its bin."""
        candidates = self.evaluate(keyword, doc_ids)
        chosen = self.selector.select(candidates)

        contents = self.bins[chosen.bin_index]
        # Counted at write time; in two-pass mode it can differ from chosen.overlap
        duplicates = len(contents & doc_ids)
        contents |= doc_ids

        self.assignments[keyword] = chosen.bin_index
        self.removed_items += duplicates
        if duplicates > 0:
            self.keywords_with_overlap += 1

        logger.debug(
            f"'{keyword}' -> bin {chosen.bin_index} (choice={chosen.choice}, "
            f"overlap={chosen.overlap}, duplicates={duplicates}, size={len(contents)})"
        )
        return Placement(keyword=keyword, bin_index=chosen.bin_index, candidate=chosen, duplicates=duplicates)

    def assign_iter(self, alphabet: Iterable[str]) -> Iterator[Placement]:
        """
        Assign stage as a generator, one Placement per eligible keyword.
        """
        if self.config.evaluation == EvaluationMode.TWO_PASS:
            source: Iterable[Tuple[str, FrozenSet[int]]] = self.precompute(alphabet)
        else:
            source = self.eligible(alphabet)

        for keyword, doc_ids in source:
            yield self.place(keyword, doc_ids)

    def finalize(self) -> PlacementResult:
        """Summarize the current bins; the result holds copies, not the live bins."""
        metadata = summarize(
            self.bins,
            k=self.config.k,
            d=self.config.d,
            removed_items=self.removed_items,
            keywords_with_overlap=self.keywords_with_overlap,
            placed_keywords=len(self.assignments),
            ignored_keywords=self.ignored_keywords,
        )
        if self.selector.fallbacks:
            logger.warning(f"{self.selector.fallbacks} keywords used the fallback candidate")
        return PlacementResult(
            bins=[set(contents) for contents in self.bins],
            metadata=metadata,
            assignments=dict(self.assignments),
        )

    def run(self, alphabet: Iterable[str]) -> PlacementResult:
        """Full run: Init -> (Precompute) -> Assign -> Finalize."""
        self.reset()
        alphabet = list(alphabet)
        logger.info(
            f"Placing {len(alphabet)} keywords into {self.config.max_bins} bins "
            f"(k={self.config.k}, d={self.config.d}, policy={self.config.policy.value}, "
            f"evaluation={self.config.evaluation.value})"
        )

        for _ in self.assign_iter(alphabet):
            pass

        result = self.finalize()
        logger.info(
            f"Placement done: {result.metadata.placed_keywords} placed, "
            f"{result.metadata.ignored_keywords} ignored, {result.metadata.total_items} items, "
            f"{result.metadata.removed_items} duplicates removed"
        )
        return result


def place_keywords(
    config: PlacementConfig,
    search: SearchBackend,
    alphabet: Iterable[str],
    progress: Optional[ProgressCallback] = None
) -> PlacementResult:
    """Convenience wrapper: build an engine and run it once."""
    return PlacementEngine(config, search, progress=progress).run(alphabet)
