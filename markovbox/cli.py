#!/usr/bin/env python3
"""
markovbox command line: build a portable Markov-in-a-box artifact.

    markovbox [--level N] [--sentences] [--strip] [--uncompressed] [--save-json]
              NAME OUTPUT FILE [FILE ...]
"""

import argparse
import sys

from markovbox.config import settings
from markovbox.services.builder import BuildOptions, build_artifact
from markovbox.utils.logger import setup_logger

logger = setup_logger(__name__)

EXIT_WRITE_FAILED = 1
EXIT_MISSING_INPUT = 3
EXIT_EMPTY_NAME = 4


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid level: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError("level must be greater than 0")
    return number


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="markovbox",
        description="Generate a self-sufficient script that quotes from its built-in Markov chain",
    )
    parser.add_argument("name", help="Name the generated script introduces itself with")
    parser.add_argument("output_file", help="Where to write the generated script")
    parser.add_argument("files", nargs="+", help="Dictionary (corpus) files to ingest, in order")

    parser.add_argument("--level", type=positive_int, default=settings.DEFAULT_LEVEL,
                        help="How many tokens of recall the chain has")
    parser.add_argument("--sentences", dest="tokenize", action="store_true",
                        help="Split into words and punctuation instead of characters")
    parser.add_argument("--strip", action="store_true", help="Replace newlines in the dictionaries with spaces")
    parser.add_argument("--uncompressed", action="store_true", help="Store the chain without compression")
    parser.add_argument("--save-json", dest="save_json", action="store_true",
                        help=f"Also save the chain as <output>{settings.JSON_SUFFIX}")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    options = BuildOptions(
        name=args.name,
        output_file=args.output_file,
        files=list(args.files),
        level=args.level,
        tokenize=args.tokenize,
        strip=args.strip,
        uncompressed=args.uncompressed,
        save_json=args.save_json,
    )

    try:
        options.validate()
    except (FileNotFoundError, IsADirectoryError) as e:
        logger.error(f"[ERR] {e}")
        return EXIT_MISSING_INPUT
    except ValueError as e:
        logger.error(f"[ERR] {e}")
        return EXIT_EMPTY_NAME

    try:
        path = build_artifact(options)
    except OSError as e:
        logger.error(f"[ERR] Build of '{options.output_file}' failed: {e}")
        return EXIT_WRITE_FAILED

    logger.info(f"[BUILD] Done! Run it with: python {path} 5s 140c")
    return 0


if __name__ == "__main__":
    sys.exit(main())
