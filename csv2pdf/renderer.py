# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Draw one part of the CSV as a bordered table."""
from __future__ import annotations

from typing import Callable, List, Sequence

from .charset import Translator
from .config import DEFAULT_STYLE, TableStyle
from .document import CELL_MARGIN, PdfDocument

RowWriter = Callable[[Sequence[str]], None]


def total_width(header: Sequence[str], widths: Sequence[int]) -> int:
    """Sum of the column widths in characters, headers included."""
    return sum(max(len(h), w) for h, w in zip(header, widths))


def page_orientation(header: Sequence[str], widths: Sequence[int], style: TableStyle = DEFAULT_STYLE) -> str:
    """``"L"`` for tables too wide for a portrait page, ``"P"`` otherwise."""
    if total_width(header, widths) > style.landscape_threshold:
        return "L"
    return "P"


def column_widths(doc: PdfDocument, header: Sequence[str], widths: Sequence[int],
                  style: TableStyle = DEFAULT_STYLE) -> List[float]:
    """Cell widths in mm, never narrower than the header label."""
    colwidths = []
    for label, w in zip(header, widths):
        label_width = doc.string_width(label, "B", style.header_font_size) + 2 * CELL_MARGIN
        colwidths.append(max(w * style.body_char_width, len(label) * style.header_char_width, label_width))
    return colwidths


def make_table(doc: PdfDocument, translate: Translator, header: Sequence[str], widths: Sequence[int],
               style: TableStyle = DEFAULT_STYLE) -> RowWriter:
    """Draw the header row and return a function that draws body rows."""
    # Colors, line width and bold font
    doc.set_fill_color(*style.header_fill)
    doc.set_text_color(*style.text_color)
    doc.set_draw_color(*style.draw_color)
    doc.set_line_width(style.line_width)
    doc.set_font("B", style.header_font_size)

    colwidths = column_widths(doc, header, widths, style)
    for w, label in zip(colwidths, header):
        doc.cell(w, style.header_height, translate(label), border="1", align="C", fill=True)
    doc.ln()

    # Color and font restoration
    doc.set_fill_color(*style.body_fill)
    doc.set_text_color(*style.text_color)
    doc.set_font("", style.body_font_size)

    fill = False

    def write_row(record: Sequence[str]) -> None:
        nonlocal fill
        for w, value in zip(colwidths, record):
            doc.cell(w, style.row_height, translate(value), border="LR", align="L", fill=fill)
        doc.ln(style.row_height)
        fill = not fill

    return write_row
