"""
Deterministic multi-choice hashing.

Each keyword maps to `d` candidate bins, one per choice index:

    bin_index(keyword, choice) = blake2b_64(keyword || choice) mod max_bins

BLAKE2b is keyed by nothing and never seeded per process, so the mapping is
stable across runs (unlike the builtin `hash()` which is salted).
"""

import hashlib
from typing import List

from .errors import ConfigurationError, HashConversionError

DIGEST_SIZE = 8  # 64-bit hash
MAX_CHOICE = 2 ** 64 - 1


def keyword_hash(keyword: str, choice: int) -> int:
    """
    Hash a (keyword, choice) pair to an unsigned 64-bit integer.

    Args:
        keyword: Keyword from the alphabet
        choice: Hash choice index (0..d-1)

    Returns:
        Integer in [0, 2**64)

    Raises:
        HashConversionError: choice does not fit an unsigned 64-bit integer

    Examples:
        >>> keyword_hash("sky", 0) == keyword_hash("sky", 0)
        True
        >>> keyword_hash("sky", 0) == keyword_hash("sky", 1)
        False
    """
    try:
        choice_bytes = int(choice).to_bytes(8, "little", signed=False)
    except OverflowError as e:
        raise HashConversionError(f"Choice {choice} is not an unsigned 64-bit integer: {e}") from e

    digest = hashlib.blake2b(keyword.encode("utf-8") + choice_bytes, digest_size=DIGEST_SIZE).digest()
    return int.from_bytes(digest, "little", signed=False)


def bin_index(keyword: str, choice: int, max_bins: int) -> int:
    """Map a (keyword, choice) pair to a bin in [0, max_bins)."""
    if max_bins <= 0:
        raise ConfigurationError(f"max_bins must be positive, got {max_bins}")
    return keyword_hash(keyword, choice) % max_bins


def candidate_bins(keyword: str, d: int, max_bins: int) -> List[int]:
    """
    Return the `d` candidate bins of a keyword, in choice order.

    Bins may repeat when two choices collide.
    """
    return [bin_index(keyword, choice, max_bins) for choice in range(d)]
