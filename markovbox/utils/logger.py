"""
Logging setup shared by the CLI and the HTTP service.
"""

import logging
import sys

from markovbox.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logger(name: str, level: str = None) -> logging.Logger:
    """
    Return a logger for an entry point.

    The ``markovbox`` root logger gets one stderr handler the first time this
    is called, so service modules using ``logging.getLogger(__name__)`` are
    covered too.
    """
    root = logging.getLogger("markovbox")
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    root.setLevel((level or settings.LOG_LEVEL).upper())
    return logging.getLogger(name)
