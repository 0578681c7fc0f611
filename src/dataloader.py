"""
Corpus loading from JSON-lines files.

Each line is a JSON object; the configured key holds the document text.
A document's id is its (zero-based) line position.
"""

import json
import logging
import re
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"\d+[,\d]*\.?\d*")


class CorpusFormatError(ValueError):
    """A corpus line is not valid JSON or is not an object"""

    def __init__(self, path: str, line_number: int, reason: str):
        super().__init__(f"{path}:{line_number}: {reason}")
        self.path = path
        self.line_number = line_number


def remove_numbers(text: str) -> str:
    """
    Remove numeric values (including thousands separators and decimals).

    Examples:
        >>> remove_numbers("Revenue grew 1,200.50 units in 2023")
        'Revenue grew  units in '
    """
    return NUMBER_PATTERN.sub("", text)


def load_corpus(path: Union[str, Path], key: str = "text", strip_numbers: bool = False) -> List[str]:
    """
    Read a JSON-lines file and extract one document per line.

    Args:
        path: Path to the .jsonl file
        key: Field holding the document text
        strip_numbers: Remove numeric values from every document

    Returns:
        List of document texts. Missing keys give an empty document;
        non-string values are JSON-encoded.

    Raises:
        OSError: file cannot be read
        CorpusFormatError: a line is not a JSON object
    """
    path = Path(path)
    corpus: List[str] = []
    missing = 0

    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                record = json.loads(line)
            except json.JSONDecodeError as e:
                raise CorpusFormatError(str(path), line_number, f"invalid JSON: {e}") from e
            if not isinstance(record, dict):
                raise CorpusFormatError(str(path), line_number, "expected a JSON object")

            value = record.get(key)
            if value is None:
                missing += 1
                text = ""
            elif isinstance(value, str):
                text = value
            else:
                text = json.dumps(value, ensure_ascii=False)

            corpus.append(remove_numbers(text) if strip_numbers else text)

    if missing:
        logger.warning(f"{missing} records in {path} have no '{key}' field")
    logger.info(f"Loaded {len(corpus)} documents from {path}")
    return corpus
