# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Charset handling: decoding the input and loading glyph mapping files.

A mapping file lists, one per line, the byte code, the Unicode code point
and the glyph name of every character a charset provides::

    !41 U+0041 uni0041
    !B3 U+0142 uni0142

The translator built from it keeps the characters the charset covers and
replaces the rest with ``?`` so the PDF never asks for a missing glyph.
"""
from __future__ import annotations

import codecs
import logging
import os
import re
from typing import Callable, Dict

from .config import UTF8_MAP_CHARSET, is_utf8
from .errors import ConfigError

logger = logging.getLogger(__name__)

Translator = Callable[[str], str]

_MAP_LINE = re.compile(r"^!([0-9A-Fa-f]{2})\s+U\+([0-9A-Fa-f]{4,6})\s+(\S+)")
_WHITESPACE = {"\t": " ", "\r": " ", "\n": " "}


def canonical_name(charset: str) -> str:
    """Spell ``charset`` the way the mapping files are named.

    ``latin2``, ``ISO8859-2`` and ``iso_8859_2`` all give ``iso-8859-2``.
    Names Python does not know are only lowercased.
    """
    try:
        name = codecs.lookup(charset).name
    except LookupError:
        return charset.lower()
    if name.startswith("iso8859-"):
        return "iso-8859-" + name[len("iso8859-"):]
    return name


def map_charset(charset: str) -> str:
    """Return the charset whose mapping file should be used for ``charset``.

    UTF-8 has no single-byte mapping, so it borrows ``CSV2PDF_UTF8_MAP``.
    """
    if is_utf8(charset):
        return canonical_name(UTF8_MAP_CHARSET)
    return canonical_name(charset)


def mapping_path(font_dir: str, charset: str) -> str:
    """Path of the mapping file for ``charset`` in ``font_dir``.

    The canonical spelling is preferred; a user font directory may still
    name the file after the spelling given on the command line.
    """
    literal = UTF8_MAP_CHARSET if is_utf8(charset) else charset
    candidates = [map_charset(charset), literal.strip().lower()]
    for name in candidates:
        path = os.path.join(font_dir, name + ".map")
        if os.path.isfile(path):
            return path
    return os.path.join(font_dir, candidates[0] + ".map")


def parse_map(lines) -> Dict[str, int]:
    """Parse mapping file lines into ``{character: byte code}``."""
    table = {}
    for line in lines:
        m = _MAP_LINE.match(line.strip())
        if not m:
            continue
        code, point, glyph = m.groups()
        if glyph == ".notdef":
            continue
        table[chr(int(point, 16))] = int(code, 16)
    return table


def load_translator(font_dir: str, charset: str) -> Translator:
    """Build the translator for ``charset`` from the mapping in ``font_dir``."""
    fn = mapping_path(font_dir, charset)
    try:
        with open(fn, "r", encoding="ascii", errors="replace") as f:
            table = parse_map(f)
    except OSError as e:
        raise ConfigError(f"error loading charset mapping from {fn!r}: {e}") from e
    if not table:
        raise ConfigError(f"charset mapping {fn!r} defines no characters")
    logger.debug(f"Loaded {len(table)} glyphs from {fn}")
    return make_translator(table)


def make_translator(table: Dict[str, int]) -> Translator:
    known = frozenset(table)

    def translate(text: str) -> str:
        out = []
        for ch in text:
            ch = _WHITESPACE.get(ch, ch)
            out.append(ch if ch in known else "?")
        return "".join(out)

    return translate
