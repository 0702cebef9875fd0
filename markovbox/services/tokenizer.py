"""
Corpus tokenizers.

Two modes are supported:
- character mode: every character is a token
- punctuation-aware mode: words, plus each delimiter (``. , ? !``, space,
  newline) as its own token
"""
from __future__ import annotations

import re
from typing import List

DELIMITERS = frozenset([".", ",", " ", "?", "!", "\n"])

_SPACE_RUN = re.compile(r" +")
_NEWLINE_RUN = re.compile(r"[\r\n]+")


def strip_newlines(text: str) -> str:
    """Replace every CR/LF run with a single space."""
    return _NEWLINE_RUN.sub(" ", text)


def split_characters(text: str) -> List[str]:
    return list(text)


def split_punctuation(text: str) -> List[str]:
    """
    Split text into words and delimiter tokens.

    Space runs collapse to one space and CR/LF runs to one newline before
    scanning.

    Example:
        >>> split_punctuation("Hello,  world!\\n")
        ['Hello', ',', ' ', 'world', '!', '\\n']
    """
    normalized = _NEWLINE_RUN.sub("\n", _SPACE_RUN.sub(" ", text))

    tokens: List[str] = []
    buffer: List[str] = []
    for char in normalized:
        if char in DELIMITERS:
            if buffer:
                tokens.append("".join(buffer))
                buffer = []
            tokens.append(char)
        else:
            buffer.append(char)

    if buffer:
        tokens.append("".join(buffer))
    return tokens


def tokenize(text: str, punctuation: bool = False, strip: bool = False) -> List[str]:
    """
    Tokenize a whole corpus text.

    Args:
        text: Raw corpus text
        punctuation: Use punctuation-aware splitting instead of characters
        strip: Replace newline runs with a space first
    """
    if strip:
        text = strip_newlines(text)
    return split_punctuation(text) if punctuation else split_characters(text)
