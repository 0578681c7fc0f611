"""
Tokenizer shared by the alphabet builder and the BM25 search engine.

Tokenization pipeline:
1. Lowercase conversion
2. Extract alphanumeric words (including hyphens)
3. Filter stopwords (English only)
4. Filter pure numbers
5. Apply stemming for the corpus language ("architectures" → "architectur")
6. Return list of meaningful tokens
"""

import re
from typing import List

from .stemmer import Language, stem

# English stopwords (based on Elasticsearch/Lucene standard list)
STOPWORDS = frozenset([
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'but', 'by',
    'for', 'if', 'in', 'into', 'is', 'it',
    'no', 'not', 'of', 'on', 'or', 'such',
    'that', 'the', 'their', 'then', 'there', 'these',
    'they', 'this', 'to', 'was', 'will', 'with'
])

WORD_PATTERN = re.compile(r"\b[^\W_]+(?:-[^\W_]+)*\b")
NUMBER_PATTERN = re.compile(r"^[0-9-]+$")


def tokenize(text: str, language: Language = Language.ENGLISH) -> List[str]:
    """
    Tokenize text for alphabet extraction and BM25 scoring.

    Args:
        text: Input text to tokenize
        language: Corpus language (selects stemmer; stopwords apply to English)

    Returns:
        List of lowercase stemmed tokens without stopwords

    Examples:
        >>> tokenize("Kubernetes-based deployment strategies!")
        ['kubernetes-bas', 'deploy', 'strategi']

        >>> tokenize("PostgreSQL 15.3 with pgvector")
        ['postgresql', 'pgvector']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    tokens = WORD_PATTERN.findall(text.lower())

    stopwords = STOPWORDS if Language(language) == Language.ENGLISH else frozenset()
    tokens = [
        t for t in tokens
        if t not in stopwords and not NUMBER_PATTERN.match(t)
    ]

    return [stem(t, language) for t in tokens]
