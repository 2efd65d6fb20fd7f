import io

import pytest

from csv2pdf.charset import load_translator
from csv2pdf.converter import convert, convert_file, render_parts
from csv2pdf.document import PdfDocument
from csv2pdf.errors import CsvParseError
from csv2pdf.segmenter import make_reader, parse_csv, read_records

MIXED = (
    "id;name;city\n"
    "1;Kovács;Budapest\n"
    "2;Szabó;Győr\n"
    "\n"
    "total;sum\n"
    "rows;2\n"
    "pages;1\n"
    "x;y\n"
    "note\n"
    "generated\n"
)


class CountingWriter(io.BytesIO):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def write(self, data):
        self.writes += 1
        return super().write(data)


@pytest.fixture
def translate(font_dir):
    return load_translator(font_dir, 'utf-8')


def test_one_page_per_part_and_every_row_drawn(font_dir, translate):
    parts = parse_csv(io.StringIO(MIXED, newline=''))
    assert [p.body_rows for p in parts] == [2, 3, 1]

    doc = PdfDocument(font_dir)
    records = read_records(make_reader(io.StringIO(MIXED, newline='')))
    drawn = render_parts(doc, records, parts, translate)
    assert doc.page_count == len(parts) == 3
    assert drawn == sum(p.body_rows for p in parts) == 6
    assert next(records, None) is None


def test_convert_writes_document_once(font_dir, translate):
    out = CountingWriter()
    parts = convert(io.StringIO(MIXED, newline=''), out, translate, font_dir)
    assert len(parts) == 3
    assert out.writes == 1
    data = out.getvalue()
    assert data.startswith(b'%PDF')
    assert data.rstrip().endswith(b'%%EOF')
    assert data.count(b'%%EOF') == 1


def test_wide_part_goes_landscape(font_dir, identity):
    text = ";".join(f"column{i}" for i in range(30)) + "\n" + ";".join("v" * 5 for _ in range(30)) + "\n"
    parts = parse_csv(io.StringIO(text, newline=''))
    doc = PdfDocument(font_dir)
    render_parts(doc, read_records(make_reader(io.StringIO(text, newline=''))), parts, identity)
    assert doc.orientation == 'L'


def test_long_part_spans_pages(font_dir, identity):
    text = "n;square\n" + "".join(f"{i};{i * i}\n" for i in range(200))
    parts = parse_csv(io.StringIO(text, newline=''))
    doc = PdfDocument(font_dir)
    drawn = render_parts(doc, read_records(make_reader(io.StringIO(text, newline=''))), parts, identity)
    assert drawn == 200
    assert doc.page_count > 1


def test_convert_empty_input_fails(translate):
    with pytest.raises(CsvParseError):
        convert(io.StringIO('', newline=''), io.BytesIO(), translate)


def test_convert_file_decodes_charset(write_csv, font_dir):
    path = write_csv("név;város\nÁrpád;Pécs\n", encoding='iso-8859-2')
    translate = load_translator(font_dir, 'iso-8859-2')
    out = io.BytesIO()
    parts = convert_file(path, out, 'iso-8859-2', translate, font_dir)
    assert parts[0].head == ['név', 'város']
    assert parts[0].widths == [5, 4]
    assert out.getvalue().startswith(b'%PDF')


def test_convert_file_parse_error_names_file(write_csv, translate):
    path = write_csv("\n")
    with pytest.raises(CsvParseError) as exc:
        convert_file(path, io.BytesIO(), 'utf-8', translate)
    assert str(exc.value).startswith(f"error parsing csv {path!r}: ")
    assert 'empty input' in str(exc.value)


def test_convert_file_strips_utf8_bom(write_csv, font_dir, translate):
    path = write_csv("\ufeffa;b\n1;2\n")
    parts = convert_file(path, io.BytesIO(), 'utf-8', translate, font_dir)
    assert parts[0].head == ['a', 'b']
