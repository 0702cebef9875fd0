"""
Fixed-order Markov chain over integer token ids.

Training slides a window of ``level + 1`` ids over each source: the first
``level`` ids (colon-joined) form the branch key and the last id is counted
as one of its successors. Persistence lives in ``serializer``.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence

from .codec import TokenCodec

if TYPE_CHECKING:
    from .serializer import ChainBundle

KEY_SEPARATOR = ":"
BOUNDARY_TOKEN = ""


def window_key(ids: Sequence[int]) -> str:
    return KEY_SEPARATOR.join(str(i) for i in ids)


def split_key(key: str) -> List[int]:
    return [int(part) for part in key.split(KEY_SEPARATOR)]


@dataclass
class ChainStats:
    """Summary of a trained chain."""
    level: int
    vocabulary_size: int
    window_keys: int
    transitions: int


class ChainModel:
    def __init__(self, level: int = 4):
        if isinstance(level, bool) or not isinstance(level, int) or level < 1:
            raise ValueError(f"level must be a positive integer, got {level!r}")
        self._level = level
        self.codec = TokenCodec()
        self._branches: Dict[str, Dict[int, int]] = {}
        self._window: List[int] = []

    @property
    def level(self) -> int:
        return self._level

    @property
    def branches(self) -> Mapping[str, Mapping[int, int]]:
        """Read-only view of the branch table; use ``successors`` for a mutable copy."""
        return MappingProxyType({key: MappingProxyType(s) for key, s in self._branches.items()})

    @property
    def vocabulary_size(self) -> int:
        return len(self.codec)

    def ingest(self, token: str) -> None:
        """Push one token through the sliding window."""
        self._window.append(self.codec.id_for(token))
        if len(self._window) <= self._level:
            return

        key = window_key(self._window[:-1])
        successor = self._window[-1]
        successors = self._branches.setdefault(key, {})
        successors[successor] = successors.get(successor, 0) + 1

        self._window.pop(0)

    def end_source(self) -> None:
        """
        Close the current source.

        Trailing context is terminated with ``level`` empty boundary tokens,
        then the window is cleared. Vocabulary and branches are kept.
        """
        for _ in range(self._level):
            self.ingest(BOUNDARY_TOKEN)
        self.reset_window()

    def reset_window(self) -> None:
        self._window = []

    def ingest_source(self, tokens: Iterable[str]) -> "ChainModel":
        """Ingest a whole source in one pass and close it."""
        for token in tokens:
            self.ingest(token)
        self.end_source()
        return self

    def successors(self, key: str) -> Dict[int, int]:
        return dict(self._branches.get(key, {}))

    def stats(self) -> ChainStats:
        return ChainStats(
            level=self._level,
            vocabulary_size=self.vocabulary_size,
            window_keys=len(self._branches),
            transitions=sum(sum(s.values()) for s in self._branches.values()),
        )

    @classmethod
    def from_bundle(cls, bundle: "ChainBundle", level: Optional[int] = None) -> "ChainModel":
        """
        Rebuild a trainable model from a parsed bundle.

        The level is taken from the branch key arity unless given explicitly.
        """
        level = level if level is not None else bundle.level
        if level is None:
            raise ValueError("Cannot infer level from a bundle without branches")

        model = cls(level)
        model.codec = TokenCodec.from_translations(bundle.translations)
        for key, successors in bundle.branches.items():
            if len(split_key(key)) != level:
                raise ValueError(f"Branch key {key!r} does not have {level} components")
            model._branches[key] = dict(successors)
        return model


def train_from_sources(sources: Iterable[Sequence[str]], level: int = 4) -> ChainModel:
    """Train a chain on already-tokenized sources, one window reset per source."""
    model = ChainModel(level)
    for tokens in sources:
        model.ingest_source(tokens)
    return model
