"""
Snowball stemmers (via NLTK), one per corpus language.

Uses the Snowball stemming algorithm (improved Porter2 stemmer):
https://snowballstem.org/

Examples (English):
- "architectures" → "architectur"
- "strategies" → "strategi"
- "running" → "run"
"""

from enum import Enum
from functools import lru_cache

from nltk.stem.snowball import SnowballStemmer


class Language(str, Enum):
    """Corpus languages with a Snowball stemmer"""
    ENGLISH = "english"
    DANISH = "danish"
    DUTCH = "dutch"
    FINNISH = "finnish"
    FRENCH = "french"
    GERMAN = "german"
    HUNGARIAN = "hungarian"
    ITALIAN = "italian"
    NORWEGIAN = "norwegian"
    PORTUGUESE = "portuguese"
    ROMANIAN = "romanian"
    RUSSIAN = "russian"
    SPANISH = "spanish"
    SWEDISH = "swedish"


@lru_cache(maxsize=None)
def get_stemmer(language: Language = Language.ENGLISH) -> SnowballStemmer:
    # Stemmers are stateless, build once per language
    return SnowballStemmer(Language(language).value)


def stem(word: str, language: Language = Language.ENGLISH) -> str:
    """
    Stem a single word using the Snowball algorithm.

    Args:
        word: Lowercase word to stem
        language: Stemmer language

    Returns:
        Stemmed word

    Examples:
        >>> stem("architectures")
        'architectur'
        >>> stem("searching")
        'search'
    """
    return get_stemmer(language).stem(word)
