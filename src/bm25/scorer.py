"""
BM25 scorer fitted to a corpus.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(q, doc) = Σ idf(term) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))
    idf(term)     = ln(1 + (N - n + 0.5) / (n + 0.5))

Where:
    tf = term frequency in document
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length over the corpus
    N = number of documents, n = documents containing the term

The "1 +" inside the logarithm keeps idf positive even for terms that appear
in every document, so such terms still retrieve documents.
"""

import math
from typing import Dict, List, Sequence


class BM25Scorer:
    """
    BM25 with corpus statistics (IDF and average document length).
    """

    def __init__(
        self,
        document_frequencies: Dict[str, int],
        document_count: int,
        avgdl: float,
        k1: float = 1.2,
        b: float = 0.75
    ):
        """
        Initialize BM25 scorer.

        Args:
            document_frequencies: {term: number of documents containing it}
            document_count: Number of documents in the corpus (N)
            avgdl: Average document length (in tokens)

            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Range: 1.2 - 2.0
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)
        """
        self.document_frequencies = document_frequencies
        self.document_count = document_count
        self.avgdl = avgdl if avgdl > 0 else 1.0
        self.k1 = k1
        self.b = b

    @classmethod
    def from_index(cls, index: Dict[str, object], k1: float = 1.2, b: float = 0.75) -> "BM25Scorer":
        """Build a scorer from `build_bm25_index` output."""
        lengths: List[int] = index["document_lengths"]
        avgdl = sum(lengths) / len(lengths) if lengths else 0.0
        return cls(
            document_frequencies=index["document_frequencies"],
            document_count=len(lengths),
            avgdl=avgdl,
            k1=k1,
            b=b,
        )

    def idf(self, term: str) -> float:
        n = self.document_frequencies.get(term, 0)
        return math.log(1 + (self.document_count - n + 0.5) / (n + 0.5))

    def score(
        self,
        query_terms: Sequence[str],
        doc_term_frequencies: Dict[str, int],
        token_count: int
    ) -> float:
        """
        Compute the BM25 score of one document for the query terms.

        Args:
            query_terms: Tokenized query
            doc_term_frequencies: Term frequency map {term: count}
            token_count: Total number of tokens in the document

        Returns:
            BM25 score (higher = more relevant, 0.0 = no matching term)
        """
        if not query_terms or not doc_term_frequencies:
            return 0.0

        score = 0.0
        for term in query_terms:
            tf = doc_term_frequencies.get(term, 0)

            if tf == 0:
                continue

            numerator = tf * (self.k1 + 1)
            denominator = tf + self.k1 * (
                1 - self.b + self.b * (token_count / self.avgdl)
            )

            score += self.idf(term) * numerator / denominator

        return score
