"""Integration fixtures - JSON-lines corpora on disk"""

import json

import pytest


@pytest.fixture
def write_corpus(tmp_path):
    """Write documents to a .jsonl file under the given key and return its path."""
    def _write(documents, key="text", name="corpus.jsonl"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as f:
            for number, document in enumerate(documents):
                f.write(json.dumps({key: document, "id": number}) + "\n")
        return path
    return _write


@pytest.fixture
def small_corpus():
    return [
        "The sky blushed pink as the sun dipped below the horizon.",
        "Apples, oranges, papayas, and more papayas.",
        "She found a forgotten letter tucked inside an old book.",
        "A single drop of rain fell, followed by a thousand more.",
        "The old book smelled of rain and forgotten summers.",
        "Papayas ripen under the pink sky of the tropics.",
        "A letter arrived before the rain, pink and sealed.",
        "The horizon held a thousand drops of sun.",
    ]
