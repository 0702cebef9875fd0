"""
Shared pytest fixtures for markovbox tests.
"""
import random
from pathlib import Path
from typing import Dict, List

import pytest

from markovbox.services.markov import ChainModel
from markovbox.services.tokenizer import tokenize


SAMPLE_CORPUS = [
    "The universe is vast. The stars are bright, and the planets are far!\n"
    "Would you like to explore the stars? I would like that.\n",
    "Friends always support each other. The stars shine for friends, always.\n"
    "Is the universe full of friends? Maybe it is!\n",
]


@pytest.fixture
def sample_corpus() -> List[str]:
    """Two small corpus sources with plenty of punctuation."""
    return list(SAMPLE_CORPUS)


@pytest.fixture
def corpus_files(sample_corpus, tmp_path) -> List[Path]:
    """Write the sample corpus to one file per source."""
    paths = []
    for i, text in enumerate(sample_corpus):
        path = tmp_path / f"dictionary_{i}.txt"
        path.write_text(text, encoding="utf-8")
        paths.append(path)
    return paths


@pytest.fixture
def trained_model(sample_corpus) -> ChainModel:
    """Level-2 punctuation-aware chain trained on the sample corpus."""
    model = ChainModel(level=2)
    for text in sample_corpus:
        model.ingest_source(tokenize(text, punctuation=True))
    return model


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def alternating_bundle() -> Dict:
    """Level-1 bundle that alternates between 'a' and '.' forever."""
    return {
        "name": "alternating",
        "translations": {"0": "a", "1": "."},
        "branches": {"0": {"1": 1}, "1": {"0": 1}},
    }


@pytest.fixture
def dead_end_bundle() -> Dict:
    """Level-1 bundle whose only walk is 'x' then 'y' into a dead end."""
    return {
        "name": "dead-end",
        "translations": {"0": "x", "1": "y"},
        "branches": {"0": {"1": 1}},
    }
