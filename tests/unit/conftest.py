"""Unit test fixtures - in-memory search backends and small corpora"""

from dataclasses import dataclass
from typing import Dict, List, Sequence

import pytest


@dataclass(frozen=True)
class FakeHit:
    document_id: int
    score: float


class FakeSearch:
    """
    Search backend returning canned results.

    Results are ranked by position in the configured id list; every call is
    recorded so tests can check how often a keyword was queried.
    """

    def __init__(self, results: Dict[str, Sequence[int]]):
        self.results = {keyword: list(ids) for keyword, ids in results.items()}
        self.calls: List[str] = []

    def search(self, query: str, limit: int) -> List[FakeHit]:
        self.calls.append(query)
        ids = self.results.get(query, [])
        return [FakeHit(document_id=doc_id, score=float(len(ids) - rank)) for rank, doc_id in enumerate(ids)][:limit]


@pytest.fixture
def fake_search_factory():
    return FakeSearch


@pytest.fixture
def overlapping_results():
    """Keywords whose result sets share documents in several ways"""
    return {
        "apple": [0, 1, 2, 3],
        "banana": [2, 3, 4, 5],
        "cherry": [0, 1, 2],
        "date": [7, 8, 9, 10],
        "elder": [4, 5, 6],
        "fig": [1],          # Below a filter_k of 2
        "grape": [9, 10, 11, 12],
        "honeydew": [],      # No results at all
    }


@pytest.fixture
def overlapping_search(overlapping_results):
    return FakeSearch(overlapping_results)


@pytest.fixture
def overlapping_alphabet(overlapping_results):
    return sorted(overlapping_results)


@pytest.fixture
def identical_corpus():
    """Four textually identical ten-word documents"""
    text = "sky river stone cloud forest meadow candle harbor lantern orchard"
    return [text] * 4
