"""
Token codec: bidirectional mapping between token strings and integer ids.

Ids are handed out on first sight as ``max(existing) + 1`` and never reused,
so a codec only ever grows.
"""
from __future__ import annotations

from typing import Dict, Iterator, Mapping


class TokenCodec:
    """Stable string <-> id mapping shared by a single chain."""

    def __init__(self):
        self._ids: Dict[str, int] = {}
        self._strings: Dict[int, str] = {}
        self._next_id = 0

    def id_for(self, token: str) -> int:
        """Return the id for ``token``, allocating a new one if unseen."""
        token_id = self._ids.get(token)
        if token_id is None:
            token_id = self._next_id
            self._ids[token] = token_id
            self._strings[token_id] = token
            self._next_id = token_id + 1
        return token_id

    def string_for(self, token_id: int) -> str:
        """Return the token string for ``token_id`` (KeyError if unknown)."""
        return self._strings[token_id]

    def translations(self) -> Dict[int, str]:
        """Copy of the id -> string table."""
        return dict(self._strings)

    @classmethod
    def from_translations(cls, translations: Mapping[int, str]) -> "TokenCodec":
        """
        Rebuild a codec from an id -> string table.

        Raises:
            ValueError: if two ids translate to the same string
        """
        codec = cls()
        for token_id, token in translations.items():
            token_id = int(token_id)
            if token in codec._ids:
                raise ValueError(
                    f"Token {token!r} is mapped to both {codec._ids[token]} and {token_id}"
                )
            codec._ids[token] = token_id
            codec._strings[token_id] = token
        codec._next_id = max(codec._strings, default=-1) + 1
        return codec

    def __len__(self) -> int:
        return len(self._strings)

    def __contains__(self, token: object) -> bool:
        return token in self._ids

    def __iter__(self) -> Iterator[int]:
        return iter(self._strings)
