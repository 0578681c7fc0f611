"""Run-level summary of a placement."""

from dataclasses import dataclass
from typing import AbstractSet, Sequence

from .errors import ConfigurationError


@dataclass(frozen=True)
class Metadata:
    """Summary statistics describing the quality of a placement"""
    k: int
    num_bins: int
    d: int
    removed_items: int          # Duplicates avoided by consolidation
    total_items: int            # Sum of bin sizes
    average_load_per_bin: int   # total_items // num_bins
    keywords_with_overlap: int  # Keywords whose chosen bin already held some of their ids
    placed_keywords: int = 0
    ignored_keywords: int = 0   # Keywords below filter_k


def summarize(
    bins: Sequence[AbstractSet[int]],
    k: int,
    d: int,
    removed_items: int,
    keywords_with_overlap: int,
    placed_keywords: int = 0,
    ignored_keywords: int = 0
) -> Metadata:
    """
    Aggregate final bin state and run counters into Metadata.

    Raises:
        ConfigurationError: no bins (average load is undefined)

    Example:
        >>> summarize([{1, 2, 3}, {4, 5, 6}, {7, 8}, {9, 10}], k=4, d=2,
        ...           removed_items=0, keywords_with_overlap=0).average_load_per_bin
        2
    """
    if len(bins) == 0:
        raise ConfigurationError("Cannot summarize a placement with zero bins")

    total_items = sum(len(contents) for contents in bins)
    return Metadata(
        k=k,
        num_bins=len(bins),
        d=d,
        removed_items=removed_items,
        total_items=total_items,
        average_load_per_bin=total_items // len(bins),
        keywords_with_overlap=keywords_with_overlap,
        placed_keywords=placed_keywords,
        ignored_keywords=ignored_keywords,
    )
