"""
BM25 index builder - per-document term frequencies for a whole corpus.

The index holds everything the scorer needs:
- term_frequencies: one {term: count} dict per document (position = document id)
- document_lengths: token count per document
- document_frequencies: {term: number of documents containing it}
"""

import logging
from collections import Counter
from typing import Dict, List, Sequence

from .stemmer import Language
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def build_bm25_index(corpus: Sequence[str], language: Language = Language.ENGLISH) -> Dict[str, object]:
    """
    Build a corpus-level BM25 index.

    Args:
        corpus: Document texts; a document's id is its position
        language: Tokenizer language

    Returns:
        Dict with "term_frequencies", "document_lengths", "document_frequencies"

    Example:
        >>> index = build_bm25_index(["Kubernetes pod deployment", "pod configuration yaml"])
        >>> index["document_frequencies"]["pod"]
        2
        >>> index["document_lengths"]
        [3, 3]
    """
    term_frequencies: List[Dict[str, int]] = []
    document_lengths: List[int] = []
    document_frequencies: Counter = Counter()

    for text in corpus:
        tokens = tokenize(text, language)
        counts = Counter(tokens)
        term_frequencies.append(dict(counts))
        document_lengths.append(len(tokens))
        document_frequencies.update(counts.keys())

    logger.debug(
        f"Built BM25 index: {len(document_frequencies)} unique terms from {len(term_frequencies)} documents"
    )

    return {
        "term_frequencies": term_frequencies,
        "document_lengths": document_lengths,
        "document_frequencies": dict(document_frequencies),
    }
