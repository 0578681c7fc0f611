"""Keyword universe (alphabet) of a corpus."""

import logging
from typing import List, Sequence

from .stemmer import Language
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


def get_alphabet(corpus: Sequence[str], language: Language = Language.ENGLISH) -> List[str]:
    """
    Return the distinct tokens of a corpus, sorted.

    Sorting fixes the keyword processing order, which placement relies on
    for reproducible results.

    Example:
        >>> get_alphabet(["papayas and more papayas", "more rain"])
        ['more', 'papaya', 'rain']
    """
    alphabet = set()
    for text in corpus:
        alphabet.update(tokenize(text, language))

    logger.debug(f"Alphabet: {len(alphabet)} keywords from {len(corpus)} documents")
    return sorted(alphabet)
