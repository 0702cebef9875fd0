"""
Playback runtime for trained chains.

Performs a weighted random walk over a decoded bundle until a sentence or
character budget runs out. Dead ends restart the walk from a random key with
whatever budget is left.

Generated artifacts embed this module's source verbatim, followed by their
payload, so it must only import the standard library.
"""
from __future__ import annotations

import base64
import json
import logging
import random
import re
import sys
import zlib
from dataclasses import dataclass
from itertools import accumulate
from typing import Callable, Dict, List, Mapping, Optional, Sequence, TextIO, Tuple

logger = logging.getLogger(__name__)

SENTENCE_MARKS = frozenset(".,!?")
KEY_SEPARATOR = ":"

DEFAULT_LIMITS = (5, 140)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_LIMIT_ERROR = 2

# a segment that emits nothing this many times in a row means the bundle cannot make progress
MAX_IDLE_RESTARTS = 1000

_SENTENCE_ARG = re.compile(r"(\d+)s", re.IGNORECASE)
_CHARACTER_ARG = re.compile(r"(\d+)c", re.IGNORECASE)


class LimitError(ValueError):
    """Invalid, missing or duplicated output limit."""


@dataclass
class Limits:
    max_sentences: Optional[int] = None
    max_characters: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_sentences is None and self.max_characters is None:
            raise LimitError("At least one of max_sentences or max_characters must be set")
        if self.max_sentences is not None and self.max_sentences < 1:
            raise LimitError("Sentence limit must be more than 0")
        if self.max_characters is not None and self.max_characters < 1:
            raise LimitError("Character limit must be more than 0")


@dataclass
class PlaybackResult:
    text: str
    reason: str  # "sentences", "characters", "empty" or "stalled"
    restarts: int = 0


class _Budget:
    """Remaining limits; charged after every emission."""

    def __init__(self, limits: Limits):
        self.sentences = limits.max_sentences
        self.characters = limits.max_characters

    def charge(self, text: str) -> Optional[str]:
        """Subtract ``text`` and return the name of an overdrawn limit, if any."""
        if self.sentences is not None:
            self.sentences -= sum(1 for char in text if char in SENTENCE_MARKS)
        if self.characters is not None:
            self.characters -= len(text)

        if self.sentences is not None and self.sentences < 0:
            return "sentences"
        if self.characters is not None and self.characters < 0:
            return "characters"
        return None


class PlaybackEngine:
    """Samples text from a decoded bundle (``name``, ``translations``, ``branches``)."""

    def __init__(self, bundle: Mapping, rng: Optional[random.Random] = None):
        if hasattr(bundle, "to_dict"):
            bundle = bundle.to_dict()
        self.name = str(bundle.get("name", ""))
        self.translations: Dict[str, str] = {
            str(token_id): token for token_id, token in bundle["translations"].items()
        }
        self.keys: List[str] = list(bundle["branches"])
        self._choices: Dict[str, Tuple[List[str], List[int]]] = {}
        for key, successors in bundle["branches"].items():
            if not successors:
                continue
            ids = [str(token_id) for token_id in successors]
            self._choices[key] = (ids, list(accumulate(successors.values())))
        self._rng = rng or random.Random()

    def start_key(self) -> str:
        return self._rng.choice(self.keys)

    def next_id(self, key: str) -> Optional[str]:
        """Draw a successor id in proportion to its count, or None at a dead end."""
        choices = self._choices.get(key)
        if choices is None:
            return None
        ids, cum_weights = choices
        return self._rng.choices(ids, cum_weights=cum_weights)[0]

    def render_key(self, key: str) -> str:
        return "".join(self.translations[part] for part in key.split(KEY_SEPARATOR))

    def run(self, limits: Limits, emit: Callable[[str], None]) -> PlaybackResult:
        """
        Walk the chain, passing every emission to ``emit``.

        Restarts after a dead end add no separator between segments. The
        emission that overdraws a limit is still passed on.
        """
        if not self.keys:
            return PlaybackResult(text="", reason="empty")

        budget = _Budget(limits)
        pieces: List[str] = []

        def spend(text: str) -> Optional[str]:
            pieces.append(text)
            emit(text)
            return budget.charge(text)

        restarts = -1
        idle = 0
        reason: Optional[str] = None
        while reason is None:
            restarts += 1
            emitted_before = len(pieces)
            key = self.start_key()
            reason = spend(self.render_key(key))

            while reason is None:
                token_id = self.next_id(key)
                if token_id is None:
                    logger.debug("Dead end at %s, restarting", key)
                    break
                reason = spend(self.translations[token_id])
                key = KEY_SEPARATOR.join(key.split(KEY_SEPARATOR)[1:] + [token_id])

            if reason is None and not any(pieces[emitted_before:]):
                idle += 1
                if idle >= MAX_IDLE_RESTARTS:
                    reason = "stalled"
            else:
                idle = 0

        return PlaybackResult(text="".join(pieces), reason=reason, restarts=restarts)

    def generate(self, limits: Limits) -> PlaybackResult:
        return self.run(limits, lambda text: None)

    def stream(self, limits: Limits, out: TextIO) -> PlaybackResult:
        def emit(text: str) -> None:
            out.write(text)
            out.flush()

        return self.run(limits, emit)


def parse_limits(
    args: Sequence[str],
    defaults: Optional[Tuple[int, int]] = DEFAULT_LIMITS,
) -> Optional[Limits]:
    """
    Parse ``<N>s`` / ``<N>c`` argument tokens.

    No arguments at all selects ``defaults``. Unrecognized tokens are ignored;
    returns None when neither limit ends up defined.

    Raises:
        LimitError: duplicated limit or a value below 1
    """
    if not args and defaults is not None:
        return Limits(*defaults)

    sentences: Optional[int] = None
    characters: Optional[int] = None
    for arg in args:
        match = _SENTENCE_ARG.fullmatch(arg)
        if match:
            if sentences is not None:
                raise LimitError("Duplicate definition, define sentence limit only once.")
            sentences = int(match.group(1))
            if sentences < 1:
                raise LimitError("Sentence limit must be more than 0")
            continue

        match = _CHARACTER_ARG.fullmatch(arg)
        if match:
            if characters is not None:
                raise LimitError("Duplicate definition, define character limit only once.")
            characters = int(match.group(1))
            if characters < 1:
                raise LimitError("Character limit must be more than 0")

    if sentences is None and characters is None:
        return None
    return Limits(max_sentences=sentences, max_characters=characters)


def format_usage(name: str, prog: str) -> str:
    return f"Use {name} like: {prog} <sentence limit>s <raw character limit>c"


def decode_payload(payload: str, compressed: bool) -> str:
    """Undo the artifact encoding: base64, then zlib inflate when compressed."""
    raw = base64.b64decode(payload)
    if compressed:
        raw = zlib.decompress(raw)
    return raw.decode("utf-8")


def play(
    bundle: Mapping,
    args: Sequence[str],
    prog: str,
    defaults: Optional[Tuple[int, int]] = DEFAULT_LIMITS,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
    rng: Optional[random.Random] = None,
) -> int:
    """Command-line contract shared by artifacts and ``markovbox-play``; returns the exit status."""
    out = out or sys.stdout
    err = err or sys.stderr

    try:
        limits = parse_limits(args, defaults)
    except LimitError as e:
        print(e, file=err)
        return EXIT_LIMIT_ERROR

    if limits is None:
        print(format_usage(str(bundle.get("name", "")), prog), file=err)
        return EXIT_USAGE

    PlaybackEngine(bundle, rng=rng).stream(limits, out)
    out.write("\n")
    return EXIT_OK


def run_artifact(
    args: Sequence[str],
    payload: str,
    compressed: bool,
    prog: str,
    defaults: Optional[Tuple[int, int]] = DEFAULT_LIMITS,
) -> int:
    bundle = json.loads(decode_payload(payload, compressed))
    return play(bundle, args, prog, defaults=defaults)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Play a saved ``.json`` bundle: ``markovbox-play BUNDLE.json [Ns] [Nc]``."""
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        print("Usage: markovbox-play BUNDLE.json [<sentence limit>s] [<raw character limit>c]", file=sys.stderr)
        return EXIT_USAGE

    path, args = argv[0], argv[1:]
    try:
        with open(path, "r", encoding="utf-8") as f:
            bundle = json.load(f)
    except (OSError, ValueError) as e:
        print(f"Cannot read bundle '{path}': {e}", file=sys.stderr)
        return EXIT_USAGE
    if not isinstance(bundle, dict) or not {"translations", "branches"} <= bundle.keys():
        print(f"Cannot read bundle '{path}': not a markovbox chain", file=sys.stderr)
        return EXIT_USAGE
    return play(bundle, args, prog=f"markovbox-play {path}")
