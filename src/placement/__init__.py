"""
d-choice placement of top-k result sets into bins.

Each keyword's document-ID set goes into exactly one of `d` hash-derived
candidate bins, chosen to consolidate duplicate ids while bounding load.

Components:
- hashing: deterministic (keyword, choice) -> bin mapping
- candidates: per-choice (bin, load, overlap) evaluation, single or two pass
- selector: configurable filtering / tie-break policy
- engine: runs placement over an alphabet
- metadata: run summary
- topk: unbinned baseline
"""

from .candidates import Candidate, PotentialContents
from .config import EvaluationMode, PlacementConfig, SelectionPolicy
from .engine import Placement, PlacementEngine, PlacementResult, place_keywords
from .errors import ConfigurationError, HashConversionError, PersistenceError, PlacementError
from .hashing import bin_index, candidate_bins, keyword_hash
from .metadata import Metadata, summarize
from .selector import BinSelector, drop_highest_by, drop_lowest_by
from .topk import summarize_top_k, top_k

__all__ = [
    "Candidate",
    "PotentialContents",
    "EvaluationMode",
    "PlacementConfig",
    "SelectionPolicy",
    "Placement",
    "PlacementEngine",
    "PlacementResult",
    "place_keywords",
    "ConfigurationError",
    "HashConversionError",
    "PersistenceError",
    "PlacementError",
    "bin_index",
    "candidate_bins",
    "keyword_hash",
    "Metadata",
    "summarize",
    "BinSelector",
    "drop_highest_by",
    "drop_lowest_by",
    "summarize_top_k",
    "top_k",
]
