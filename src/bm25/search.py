"""
BM25 search engine over an in-memory corpus.

Built once from a list of document texts; document ids are positions in
that list. Queries go through the same tokenizer as the corpus unless they
are already an index term, and only documents with a positive score are
returned.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence

import numpy as np

from .index_builder import build_bm25_index
from .scorer import BM25Scorer
from .stemmer import Language
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchHit:
    """Single ranked search result"""
    document_id: int  # Position of the document in the corpus
    score: float      # BM25 relevance score (higher = more relevant)


class BM25SearchEngine:
    """
    Ranked keyword search with BM25.

    Example:
        >>> engine = BM25SearchEngine(["The sky blushed pink", "Apples and papayas"])
        >>> [hit.document_id for hit in engine.search("sky", 10)]
        [0]
    """

    def __init__(
        self,
        corpus: Sequence[str],
        language: Language = Language.ENGLISH,
        k1: float = 1.2,
        b: float = 0.75
    ):
        self.language = Language(language)
        self.index = build_bm25_index(corpus, self.language)
        self.scorer = BM25Scorer.from_index(self.index, k1=k1, b=b)

        self._postings: Dict[str, List[int]] = defaultdict(list)
        for doc_id, frequencies in enumerate(self.index["term_frequencies"]):
            for term in frequencies:
                self._postings[term].append(doc_id)

        logger.info(
            f"BM25 search engine ready: {len(corpus)} documents, "
            f"{len(self._postings)} terms ({self.language.value})"
        )

    def __len__(self) -> int:
        return len(self.index["document_lengths"])

    def search(self, query: str, limit: int) -> List[SearchHit]:
        """
        Return up to `limit` documents ranked by BM25 score.

        Ties are broken by ascending document id so results are deterministic.
        """
        if limit <= 0:
            return []

        # Alphabet keywords are already index terms; stemming them again can change them
        query_terms = [query] if query in self._postings else tokenize(query, self.language)
        candidate_ids = sorted({doc_id for term in query_terms for doc_id in self._postings.get(term, ())})
        if not candidate_ids:
            return []

        term_frequencies = self.index["term_frequencies"]
        lengths = self.index["document_lengths"]
        scores = np.array([
            self.scorer.score(query_terms, term_frequencies[doc_id], lengths[doc_id])
            for doc_id in candidate_ids
        ])
        ids = np.array(candidate_ids)

        # Primary key: score descending, secondary: document id ascending
        order = np.lexsort((ids, -scores))

        hits = []
        for position in order[:limit]:
            score = float(scores[position])
            if score <= 0:
                break
            hits.append(SearchHit(document_id=int(ids[position]), score=score))
        return hits
