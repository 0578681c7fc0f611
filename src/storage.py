"""
Local persistence of placement bins.

File format (JSON):
{
    "bins": [[0, 3, 7], [], [2, 5], ...]   # one sorted id list per bin
}
"""

import json
import logging
from pathlib import Path
from typing import AbstractSet, List, Sequence, Set, Union

from .placement.errors import PersistenceError

logger = logging.getLogger(__name__)


def save_bins(bins: Sequence[AbstractSet[int]], path: Union[str, Path]) -> Path:
    """
    Write bins to a JSON file, creating parent directories.

    Raises:
        PersistenceError: directory or file cannot be written
    """
    path = Path(path)
    payload = {"bins": [sorted(int(doc_id) for doc_id in contents) for contents in bins]}

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f)
    except OSError as e:
        raise PersistenceError(str(path), str(e)) from e

    logger.info(f"Saved {len(bins)} bins to {path}")
    return path


def load_bins(path: Union[str, Path]) -> List[Set[int]]:
    """Read bins written by `save_bins`."""
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    return [set(contents) for contents in payload["bins"]]
