"""
Chain training, serialization, packaging and playback services.
"""

from .codec import TokenCodec
from .markov import ChainModel, ChainStats, train_from_sources
from .packager import extract_payload, render_artifact, write_artifact
from .playback import LimitError, Limits, PlaybackEngine, PlaybackResult
from .serializer import ChainBundle, serialize
from .tokenizer import tokenize

__all__ = [
    "TokenCodec",
    "ChainModel",
    "ChainStats",
    "train_from_sources",
    "ChainBundle",
    "serialize",
    "extract_payload",
    "render_artifact",
    "write_artifact",
    "LimitError",
    "Limits",
    "PlaybackEngine",
    "PlaybackResult",
    "tokenize",
]
