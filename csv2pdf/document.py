# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Cell based drawing on top of a ReportLab canvas.

ReportLab's canvas works in points with the origin at the bottom left.
Tables are easier to lay out with a text cursor that moves left to right
and top to bottom, so :class:`PdfDocument` keeps one in millimetres and
converts when drawing. It also breaks to a new page when a cell would run
into the bottom margin.
"""
from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import Optional

from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from .config import DEFAULT_STYLE, TableStyle
from .errors import RenderError

logger = logging.getLogger(__name__)

# Horizontal padding between a cell border and its text, in mm
CELL_MARGIN = 1.0
CORE_FONTS = {"": "Helvetica", "B": "Helvetica-Bold"}


def register_fonts(font_dir: Optional[str], style: TableStyle = DEFAULT_STYLE) -> dict:
    """Register the TrueType fonts found in ``font_dir``.

    Returns a mapping from font style (``""`` or ``"B"``) to the ReportLab
    font name. Falls back to the core Helvetica fonts, which only cover
    Latin-1 glyphs, when the TrueType files are missing.
    """
    files = {"": style.font_file, "B": style.bold_font_file}
    paths = {k: os.path.join(font_dir, v) for k, v in files.items()} if font_dir else {}
    if not paths or not all(os.path.isfile(p) for p in paths.values()):
        logger.warning(f"No TrueType fonts in {font_dir!r}, falling back to {CORE_FONTS['']}")
        return dict(CORE_FONTS)

    fonts = {}
    for key, path in paths.items():
        name = os.path.splitext(os.path.basename(path))[0]
        if name not in pdfmetrics.getRegisteredFontNames():
            try:
                pdfmetrics.registerFont(TTFont(name, path))
            except Exception as e:
                raise RenderError(f"cannot load font {path!r}: {e}") from e
            logger.debug(f"Registered font {name} from {path}")
        fonts[key] = name
    return fonts


class PdfDocument:
    """An in-memory PDF with a text cursor, measured in millimetres."""

    def __init__(self, font_dir: Optional[str] = None, style: TableStyle = DEFAULT_STYLE):
        self.style = style
        self.fonts = register_fonts(font_dir, style)
        self.buffer = BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.canvas.setCreator("csv2pdf")
        self.orientation = "P"
        self.width, self.height = (v / mm for v in A4)
        self.x = self.y = style.margin
        self.page_count = 0
        self.last_height = 0.0
        self._font = (self.fonts[""], 12.0)
        self._fill_color = (0, 0, 0)
        self._text_color = (0, 0, 0)
        self._draw_color = (0, 0, 0)
        self._line_width = 0.2
        self._saved = False

    # State

    def set_font(self, style: str = "", size: Optional[float] = None) -> None:
        if style not in self.fonts:
            raise RenderError(f"unknown font style {style!r}")
        self._font = (self.fonts[style], size if size is not None else self._font[1])

    def set_fill_color(self, r: int, g: int, b: int) -> None:
        self._fill_color = (r, g, b)

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self._text_color = (r, g, b)

    def set_draw_color(self, r: int, g: int, b: int) -> None:
        self._draw_color = (r, g, b)
        self.canvas.setStrokeColorRGB(*_rgb(self._draw_color))

    def set_line_width(self, width: float) -> None:
        self._line_width = width
        self.canvas.setLineWidth(width * mm)

    def string_width(self, text: str, style: str = "", size: Optional[float] = None) -> float:
        """Rendered width of ``text`` in mm."""
        font = self.fonts.get(style, self._font[0])
        return pdfmetrics.stringWidth(text, font, size if size is not None else self._font[1]) / mm

    # Pages

    def add_page(self, orientation: str = "P") -> None:
        """Finish the current page and start a new A4 page."""
        orientation = orientation.upper()
        if orientation not in ("P", "L"):
            raise RenderError(f"bad page orientation {orientation!r}")
        if self._saved:
            raise RenderError("document already written")
        if self.page_count:
            self.canvas.showPage()
        size = landscape(A4) if orientation == "L" else portrait(A4)
        self.canvas.setPageSize(size)
        self.orientation = orientation
        self.width, self.height = (v / mm for v in size)
        self.x = self.y = self.style.margin
        self.page_count += 1
        # showPage resets the graphics state
        self.canvas.setStrokeColorRGB(*_rgb(self._draw_color))
        self.canvas.setLineWidth(self._line_width * mm)

    def _page_break_needed(self, h: float) -> bool:
        return self.y + h > self.height - self.style.bottom_margin

    # Drawing

    def cell(self, w: float, h: float, text: str = "", border: str = "", ln: int = 0,
             align: str = "L", fill: bool = False) -> None:
        """Draw one cell at the cursor and advance it.

        ``border`` is ``"1"`` for a full frame or any of ``L``, ``T``,
        ``R``, ``B``. ``ln`` 0 moves right, 1 to the start of the next line,
        2 below the cell.
        """
        if not self.page_count:
            raise RenderError("no page started, call add_page first")
        if self._page_break_needed(h):
            x = self.x
            self.add_page(self.orientation)
            self.x = x

        c = self.canvas
        left = self.x * mm
        top = (self.height - self.y) * mm
        bottom = top - h * mm
        right = left + w * mm

        if fill:
            c.setFillColorRGB(*_rgb(self._fill_color))
            c.rect(left, bottom, w * mm, h * mm, stroke=0, fill=1)
        if border == "1":
            c.rect(left, bottom, w * mm, h * mm, stroke=1, fill=0)
        else:
            if "L" in border:
                c.line(left, bottom, left, top)
            if "T" in border:
                c.line(left, top, right, top)
            if "R" in border:
                c.line(right, bottom, right, top)
            if "B" in border:
                c.line(left, bottom, right, bottom)

        if text:
            font, size = self._font
            sw = self.string_width(text)
            if align == "C":
                tx = self.x + (w - sw) / 2
            elif align == "R":
                tx = self.x + w - CELL_MARGIN - sw
            else:
                tx = self.x + CELL_MARGIN
            # vertically centred: cap height is roughly 0.7 em
            baseline = self.y + h / 2 + 0.3 * size / mm
            c.saveState()
            path = c.beginPath()
            path.rect(left, bottom, w * mm, h * mm)
            c.clipPath(path, stroke=0, fill=0)
            c.setFont(font, size)
            c.setFillColorRGB(*_rgb(self._text_color))
            c.drawString(tx * mm, (self.height - baseline) * mm, text)
            c.restoreState()

        self.last_height = h
        if ln == 1:
            self.x = self.style.margin
            self.y += h
        elif ln == 2:
            self.y += h
        else:
            self.x += w

    def ln(self, h: Optional[float] = None) -> None:
        """Move the cursor to the left margin of the next line."""
        self.x = self.style.margin
        self.y += self.last_height if h is None else h

    # Output

    def output(self, stream) -> int:
        """Finish the document and write it to ``stream``; returns bytes written."""
        if self._saved:
            raise RenderError("document already written")
        try:
            self.canvas.save()
        except Exception as e:
            raise RenderError(f"error generating PDF: {e}") from e
        self._saved = True
        data = self.buffer.getvalue()
        try:
            stream.write(data)
            if hasattr(stream, "flush"):
                stream.flush()
        except OSError as e:
            raise RenderError(f"error writing PDF: {e}") from e
        logger.info(f"PDF generated: {self.page_count} page(s), {len(data)} bytes")
        return len(data)


def _rgb(color):
    r, g, b = color
    return r / 255.0, g / 255.0, b / 255.0
