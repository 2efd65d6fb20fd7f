"""csv2pdf: print semicolon separated CSV files as PDF tables.

A file may hold several tables one after the other; a change in the number
of fields per record starts a new table, which is printed on its own page.
"""
from __future__ import annotations

__version__ = "0.3.0"

from .converter import convert, convert_file  # noqa: E402
from .segmenter import Part, parse_csv  # noqa: E402

__all__ = ['Part', 'convert', 'convert_file', 'parse_csv', '__version__']
