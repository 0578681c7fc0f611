"""
BM25 search over an in-memory corpus.

Components:
- tokenizer: Text tokenization for term extraction
- stemmer: Snowball stemming per corpus language
- alphabet: Keyword universe of a corpus
- index_builder: Per-document term frequencies and document frequencies
- scorer: BM25 scoring with corpus IDF
- search: Ranked search engine returning SearchHit lists
"""

from .tokenizer import tokenize
from .stemmer import Language, stem
from .alphabet import get_alphabet
from .index_builder import build_bm25_index
from .scorer import BM25Scorer
from .search import BM25SearchEngine, SearchHit

__all__ = [
    "tokenize",
    "Language",
    "stem",
    "get_alphabet",
    "build_bm25_index",
    "BM25Scorer",
    "BM25SearchEngine",
    "SearchHit",
]
