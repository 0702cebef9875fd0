"""
Artifact packager.

An artifact is a standalone Python script: the playback module source,
followed by the bundle as a base64 data constant (zlib-deflated first unless
uncompressed) and a ``__main__`` block that feeds it to ``run_artifact``.
Artifacts only ever decode data; they never decompress code.
"""
from __future__ import annotations

import base64
import inspect
import logging
import os
import re
import tempfile
import zlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple, Union

from . import playback

logger = logging.getLogger(__name__)

SHEBANG = "#!/usr/bin/env python3"

_PAYLOAD_RE = re.compile(r'^PAYLOAD = """(?P<data>[A-Za-z0-9+/=\n]*)"""$', re.MULTILINE)
_COMPRESSED_RE = re.compile(r"^COMPRESSED = (?P<flag>True|False)$", re.MULTILINE)

_TRAILER = '''

PAYLOAD = """{payload}"""
COMPRESSED = {compressed}
BUNDLE_DEFAULTS = {defaults!r}

if __name__ == "__main__":
    sys.exit(run_artifact(sys.argv[1:], PAYLOAD, COMPRESSED, prog=sys.argv[0], defaults=BUNDLE_DEFAULTS))
'''


def encode_payload(bundle_json: str, compressed: bool) -> str:
    """Text-safe payload: base64 in 76-column lines, deflated first when compressed."""
    raw = bundle_json.encode("utf-8")
    if compressed:
        raw = zlib.compress(raw, 9)
    return base64.encodebytes(raw).decode("ascii")


def playback_source() -> str:
    return inspect.getsource(playback)


def render_artifact(
    bundle_json: str,
    uncompressed: bool = False,
    defaults: Tuple[int, int] = playback.DEFAULT_LIMITS,
    generated_at: Optional[datetime] = None,
) -> str:
    """Build the artifact script text for a bundle JSON string."""
    generated_at = generated_at or datetime.now(timezone.utc)
    header = (
        f"{SHEBANG}\n"
        f"# Generated with markovbox, portable Markov-in-a-box, on {generated_at.isoformat(timespec='seconds')}\n"
    )
    payload = encode_payload(bundle_json, compressed=not uncompressed)
    trailer = _TRAILER.format(
        payload="\n" + payload,
        compressed=not uncompressed,
        defaults=tuple(defaults),
    )
    return header + playback_source().rstrip("\n") + "\n" + trailer


def extract_payload(artifact_text: str) -> str:
    """
    Recover the bundle JSON embedded in an artifact.

    Raises:
        ValueError: if the text is not a markovbox artifact
    """
    payload = _PAYLOAD_RE.search(artifact_text)
    flag = _COMPRESSED_RE.search(artifact_text)
    if payload is None or flag is None:
        raise ValueError("Not a markovbox artifact: payload not found")
    return playback.decode_payload(payload.group("data"), compressed=flag.group("flag") == "True")


def _atomic_write(path: Path, text: str, executable: bool = False) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.chmod(tmp_name, 0o755 if executable else 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def write_artifact(
    bundle_json: str,
    output_file: Union[str, Path],
    uncompressed: bool = False,
    save_json: bool = False,
    json_suffix: str = ".json",
    defaults: Tuple[int, int] = playback.DEFAULT_LIMITS,
) -> Path:
    """
    Write the runnable artifact (and optionally the raw JSON beside it).

    Raises:
        OSError: if a destination cannot be written; nothing partial is left behind
    """
    output_path = Path(output_file)
    artifact = render_artifact(bundle_json, uncompressed=uncompressed, defaults=defaults)

    _atomic_write(output_path, artifact, executable=True)
    logger.info(
        f"[PACKAGE] Wrote {'uncompressed' if uncompressed else 'compressed'} artifact "
        f"{output_path} ({len(artifact)} chars)"
    )

    if save_json:
        json_path = output_path.with_name(output_path.name + json_suffix)
        _atomic_write(json_path, bundle_json + "\n")
        logger.info(f"[PACKAGE] Wrote bundle JSON {json_path}")

    return output_path
