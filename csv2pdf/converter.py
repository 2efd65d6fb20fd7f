# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Convert a CSV stream into a PDF with one table per part.

The stream is read twice: once to find the parts and their column widths,
then, after seeking back to the start, to draw the rows.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .charset import Translator
from .config import DEFAULT_STYLE, TableStyle, is_utf8
from .document import PdfDocument
from .errors import CsvParseError, InputError
from .renderer import make_table, page_orientation
from .segmenter import Part, iter_part_rows, make_reader, parse_csv, read_records

logger = logging.getLogger(__name__)


def render_parts(doc: PdfDocument, records, parts: List[Part], translate: Translator,
                 style: TableStyle = DEFAULT_STYLE) -> int:
    """Draw every part from ``records``; returns the number of body rows drawn."""
    drawn = 0
    for part in parts:
        logger.info(f"head={part.head!r}, colwidths={part.widths!r}")
        doc.add_page(page_orientation(part.head, part.widths, style))
        write_row = make_table(doc, translate, part.head, part.widths, style)
        for record in iter_part_rows(records, part):
            write_row(record)
            drawn += 1
    return drawn


def convert(stream, out, translate: Translator, font_dir: Optional[str] = None,
            style: TableStyle = DEFAULT_STYLE) -> List[Part]:
    """Render the decoded, seekable text ``stream`` as PDF into ``out``."""
    parts = parse_csv(stream)
    logger.info(f"Found {len(parts)} part(s)")
    try:
        stream.seek(0)
    except (OSError, ValueError) as e:
        raise InputError(f"error seeking back on input: {e}") from e

    doc = PdfDocument(font_dir, style)
    records = read_records(make_reader(stream))
    drawn = render_parts(doc, records, parts, translate, style)
    logger.debug(f"Drew {drawn} rows on {doc.page_count} page(s)")
    doc.output(out)
    return parts


def convert_file(path: str, out, charset: str, translate: Translator, font_dir: Optional[str] = None,
                 style: TableStyle = DEFAULT_STYLE) -> List[Part]:
    """Open ``path`` decoded with ``charset`` and convert it."""
    encoding = "utf-8-sig" if is_utf8(charset) else charset
    try:
        stream = open(path, "r", encoding=encoding, errors="replace", newline="")
    except OSError as e:
        raise InputError(f"error opening {path!r}: {e}") from e
    with stream:
        try:
            return convert(stream, out, translate, font_dir, style)
        except CsvParseError as e:
            err = CsvParseError(f"error parsing csv {path!r}: {e}")
            err.line = e.line
            raise err from e
