# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Runtime configuration.

Defaults can be overridden via environment variables; command line flags
override those in turn.
"""
from __future__ import annotations

import codecs
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .errors import ConfigError

# Tunable settings (can be overridden via environment variables)
DEFAULT_FONTDIR = os.getenv("CSV2PDF_FONTDIR", "")
FONT_ARCHIVE = os.getenv("CSV2PDF_FONT_ARCHIVE", "")
UTF8_MAP_CHARSET = os.getenv("CSV2PDF_UTF8_MAP", "iso-8859-2")
EXTRACT_WORKERS = int(os.getenv("CSV2PDF_WORKERS", "16"))
LOG_LEVEL = os.getenv("CSV2PDF_LOG_LEVEL", "INFO")

FALLBACK_CHARSET = "utf-8"

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class TableStyle:
    """Fonts, sizes and colours used to draw a table.

    Widths are in millimetres. ``body_char_width`` and
    ``header_char_width`` convert a character count into a cell width;
    header characters are weighted more because the header is bold and
    larger.
    """

    font_file: str = "DejaVuSans.ttf"
    bold_font_file: str = "DejaVuSans-Bold.ttf"
    header_font_size: float = 10
    body_font_size: float = 8
    header_height: float = 7
    row_height: float = 6
    body_char_width: float = 1.75
    header_char_width: float = 2.0
    line_width: float = 0.3
    header_fill: Color = (255, 0, 0)
    body_fill: Color = (224, 235, 255)
    text_color: Color = (0, 0, 0)
    draw_color: Color = (128, 0, 0)
    landscape_threshold: int = 190
    margin: float = 10
    bottom_margin: float = 20


DEFAULT_STYLE = TableStyle()


def charset_from_locale(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the codeset named by the locale variables, if any.

    ``hu_HU.ISO-8859-2@euro`` gives ``iso-8859-2``; ``C`` and ``POSIX``
    carry no codeset.
    """
    if environ is None:
        environ = os.environ
    for var in ("LC_ALL", "LC_CTYPE", "LANG"):
        value = environ.get(var)
        if not value:
            continue
        value = value.split("@", 1)[0]
        if "." not in value:
            # the first non-empty variable wins even without a codeset
            return None
        codeset = value.split(".", 1)[1].strip()
        return codeset.lower() or None
    return None


def resolve_charset(name: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> str:
    """Pick the input charset and check that Python can decode it."""
    if environ is None:
        environ = os.environ
    charset = name or environ.get("CSV2PDF_CHARSET") or charset_from_locale(environ) or FALLBACK_CHARSET
    charset = charset.strip().lower()
    try:
        codecs.lookup(charset)
    except LookupError:
        raise ConfigError(f"unknown charset {charset!r}")
    return charset


def is_utf8(charset: str) -> bool:
    return codecs.lookup(charset).name == "utf-8"
