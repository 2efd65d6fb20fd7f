# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Exception types raised by csv2pdf.

Library code raises these; only the command line entry point turns them
into a message on stderr and an exit status.
"""


class Csv2PdfError(Exception):
    """Base class for every error csv2pdf raises on purpose."""


class ConfigError(Csv2PdfError):
    """Fonts, mapping files or the charset cannot be resolved."""


class AssetError(ConfigError):
    """Extracting the bundled font archive failed."""


class InputError(Csv2PdfError):
    """The CSV input cannot be opened, copied or re-read."""


class CsvParseError(Csv2PdfError):
    """The CSV input is empty or malformed."""

    def __init__(self, message, line=None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class RenderError(Csv2PdfError):
    """The PDF document could not be produced."""
