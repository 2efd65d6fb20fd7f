# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Command line entry point: CSV on a file or stdin, PDF on stdout.

Usage:
  csv2pdf [--charset NAME] [--fontdir DIR] [-v] [INPUT]

INPUT defaults to stdin (also spelled ``-``). Logging goes to stderr so
stdout carries nothing but the PDF.
"""
from __future__ import annotations

import argparse
import logging
import os
import shutil
import sys
import tempfile
from typing import BinaryIO, Optional, Tuple

from . import __version__
from .assets import prepare_font_dir
from .charset import load_translator, map_charset
from .config import DEFAULT_FONTDIR, DEFAULT_STYLE, EXTRACT_WORKERS, LOG_LEVEL, resolve_charset
from .converter import convert_file
from .errors import Csv2PdfError, InputError

logger = logging.getLogger("csv2pdf")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv2pdf",
        description="Print a semicolon separated CSV file as PDF tables (one per column layout) to stdout.",
    )
    parser.add_argument("input", nargs="?", default="-", help="Input CSV file (default: stdin)")
    parser.add_argument(
        "--charset",
        default=None,
        help="Input charset (default: $CSV2PDF_CHARSET, the locale's codeset, or utf-8)",
    )
    parser.add_argument(
        "--fontdir",
        default=DEFAULT_FONTDIR or None,
        help="Directory with fonts and <charset>.map files (default: bundled fonts)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s', stream=sys.stderr)
    logger.setLevel(level)


def materialize_input(path: str, stdin: BinaryIO) -> Tuple[str, Optional[str]]:
    """Return ``(csv_path, temp_path)``.

    Stdin cannot be read twice, so it is saved to a temp file first;
    ``temp_path`` is that file (to delete afterwards) or None.
    """
    if path and path != "-":
        return path, None
    try:
        fd, temp_path = tempfile.mkstemp(prefix="csv2pdf-", suffix=".csv")
    except OSError as e:
        raise InputError(f"error creating tempfile: {e}") from e
    try:
        with os.fdopen(fd, "wb") as f:
            shutil.copyfileobj(stdin, f)
    except OSError as e:
        os.remove(temp_path)
        raise InputError(f"error saving csv: {e}") from e
    logger.debug(f"Saved stdin to {temp_path}")
    return temp_path, temp_path


def run(args, stdin: BinaryIO, stdout: BinaryIO) -> None:
    charset = resolve_charset(args.charset)
    font_dir, cleanup = prepare_font_dir(args.fontdir, workers=EXTRACT_WORKERS)
    temp_path = None
    try:
        logger.debug(f"Using charset {charset} with {map_charset(charset)}.map from {font_dir}")
        translate = load_translator(font_dir, charset)
        csv_path, temp_path = materialize_input(args.input, stdin)
        convert_file(csv_path, stdout, charset, translate, font_dir, DEFAULT_STYLE)
    finally:
        if temp_path:
            try:
                os.remove(temp_path)
            except OSError:
                logger.warning(f"Could not remove temp file {temp_path}")
        cleanup()


def main(argv: Optional[list] = None, stdin: Optional[BinaryIO] = None, stdout: Optional[BinaryIO] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    if stdin is None:
        stdin = sys.stdin.buffer
    if stdout is None:
        stdout = sys.stdout.buffer
    try:
        run(args, stdin, stdout)
    except (Csv2PdfError, OSError) as e:
        logger.error(f"csv2pdf: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
