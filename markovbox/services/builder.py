"""
Build pipeline: corpus files -> tokens -> chain -> bundle -> artifact.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from markovbox.config import settings

from .markov import ChainModel
from .packager import write_artifact
from .serializer import chain_to_json
from .tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    name: str
    output_file: str
    files: List[str] = field(default_factory=list)
    level: int = field(default_factory=lambda: settings.DEFAULT_LEVEL)
    tokenize: bool = False
    strip: bool = False
    uncompressed: bool = False
    save_json: bool = False

    def validate(self) -> "BuildOptions":
        """
        Check the options before any corpus is read.

        Raises:
            ValueError: empty name, no input files or a non-positive level
            FileNotFoundError: an input file is missing
            IsADirectoryError: an input path is a directory
        """
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("Your name must be nonempty!")
        if isinstance(self.level, bool) or not isinstance(self.level, int) or self.level < 1:
            raise ValueError("level must be greater than 0")
        if not self.files:
            raise ValueError("At least one dictionary file is required")
        for path in self.files:
            if not os.path.exists(path):
                raise FileNotFoundError(f"Dictionary '{path}' does not exist")
            if os.path.isdir(path):
                raise IsADirectoryError(f"Dictionary '{path}' is a directory")
        return self


def read_corpus(path: str, encoding: str = None) -> str:
    with open(path, "r", encoding=encoding or settings.CORPUS_ENCODING, errors="replace") as f:
        return f.read()


def build_chain(options: BuildOptions) -> ChainModel:
    """Ingest every input file in order, one window reset per file."""
    options.validate()
    model = ChainModel(options.level)

    for path in options.files:
        logger.info(f"[INGEST] Ingesting '{path}'...")
        tokens = tokenize(read_corpus(path), punctuation=options.tokenize, strip=options.strip)
        model.ingest_source(tokens)
        logger.debug(f"[INGEST] {len(tokens)} tokens, vocabulary now {model.vocabulary_size}")

    stats = model.stats()
    logger.info(
        f"[BUILD] Chain ready: level {stats.level}, {stats.vocabulary_size} tokens, "
        f"{stats.window_keys} keys, {stats.transitions} transitions"
    )
    return model


def build_artifact(options: BuildOptions) -> Path:
    """Train on the input files and write the artifact (plus JSON if requested)."""
    options.validate()
    logger.info(
        f"[BUILD] Generating a Markov generator named '{options.name}', saving to '{options.output_file}'"
    )
    logger.info(
        f"[BUILD] Level {options.level}, "
        f"{'with' if options.tokenize else 'without'} sentence tokenization, "
        f"{'uncompressed' if options.uncompressed else 'compressed'}, "
        f"newlines {'stripped' if options.strip else 'kept'}"
    )

    model = build_chain(options)
    return write_artifact(
        chain_to_json(model, options.name),
        options.output_file,
        uncompressed=options.uncompressed,
        save_json=options.save_json,
        json_suffix=settings.JSON_SUFFIX,
        defaults=settings.playback_defaults,
    )
