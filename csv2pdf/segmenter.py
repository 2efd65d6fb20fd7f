# Copyright (c) 2025 Ryan Kenning
# Licensed under the MIT License - see LICENSE file for details

"""Split a CSV stream into parts that share a column count.

Some exports glue several tables into one file; the only reliable marker
between them is a change in the number of fields per record. Each run of
records with the same field count becomes a :class:`Part`, headed by its
first record.
"""
from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from typing import Iterator, List

from .errors import CsvParseError

logger = logging.getLogger(__name__)

DELIMITER = ";"


@dataclass
class Part:
    """One table of the input.

    ``first_line`` and ``last_line`` are 1-based record numbers, both
    inclusive; ``first_line`` is the header record.
    """

    first_line: int
    last_line: int
    head: List[str]
    widths: List[int] = field(default_factory=list)

    @property
    def body_rows(self) -> int:
        """Number of records after the header."""
        return self.last_line - self.first_line


def make_reader(stream):
    """Return a csv reader for semicolon separated, loosely quoted input."""
    return csv.reader(
        stream,
        delimiter=DELIMITER,
        quotechar='"',
        skipinitialspace=True,
        strict=False,
    )


def read_records(reader) -> Iterator[List[str]]:
    """Yield the non-empty records of ``reader``.

    Blank lines are not records, so they do not count towards line numbers.
    """
    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise CsvParseError(str(e), line=reader.line_num) from e
        if record:
            yield record


def parse_csv(stream) -> List[Part]:
    """Scan ``stream`` once and return its parts in file order."""
    records = read_records(make_reader(stream))
    head = next(records, None)
    if head is None:
        raise CsvParseError("empty input, no header record found")

    parts: List[Part] = []
    part = Part(first_line=1, last_line=1, head=head, widths=[0] * len(head))
    n = 1
    for record in records:
        n += 1
        if len(record) != len(part.head):
            logger.info(f"new part with {len(record)} cols (previous part had {len(part.head)})")
            part.last_line = n - 1
            parts.append(part)
            part = Part(first_line=n, last_line=n, head=record, widths=[0] * len(record))
            continue
        widths = part.widths
        for i, v in enumerate(record):
            if len(v) > widths[i]:
                widths[i] = len(v)
    part.last_line = n
    parts.append(part)
    return parts


def iter_part_rows(records: Iterator[List[str]], part: Part) -> Iterator[List[str]]:
    """Replay ``part`` from ``records``: skip its header, yield its body.

    ``records`` must be positioned at the part's header record, e.g. a
    :func:`read_records` iterator shared across consecutive parts.
    """
    head = next(records, None)
    if head is None:
        raise CsvParseError("input ended before header of part", line=part.first_line)
    if head != part.head:
        raise CsvParseError(f"header changed between passes: {head!r} != {part.head!r}", line=part.first_line)
    for offset in range(1, part.body_rows + 1):
        record = next(records, None)
        if record is None:
            raise CsvParseError("input ended inside part", line=part.first_line + offset)
        yield record
