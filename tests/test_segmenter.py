import io

import pytest

from csv2pdf.errors import CsvParseError
from csv2pdf.segmenter import Part, iter_part_rows, make_reader, parse_csv, read_records


def _parse(text):
    return parse_csv(io.StringIO(text, newline=''))


def test_single_schema_is_one_part():
    parts = _parse("name;qty;price\nalma;2;100\nkörte;13;2500\n")
    assert len(parts) == 1
    part = parts[0]
    assert part.head == ['name', 'qty', 'price']
    assert part.first_line == 1
    assert part.last_line == 3
    assert part.body_rows == 2
    assert part.widths == [5, 2, 4]


def test_column_count_change_starts_new_part():
    rows = ["a;b;c"] + [f"{i};{i};{i}" for i in range(2, 5)]
    rows += ["x;y"] + [f"{i};{i * 100}" for i in range(6, 11)]
    parts = _parse("\n".join(rows) + "\n")

    assert len(parts) == 2
    first, second = parts
    assert (first.first_line, first.last_line) == (1, 4)
    assert first.head == ['a', 'b', 'c']
    assert (second.first_line, second.last_line) == (5, 10)
    assert second.head == ['x', 'y']
    assert second.widths == [2, 4]


def test_header_only():
    parts = _parse("one;two;three\n")
    assert parts == [Part(first_line=1, last_line=1, head=['one', 'two', 'three'], widths=[0, 0, 0])]
    assert parts[0].body_rows == 0


@pytest.mark.parametrize('text', ["", "\n\n", "\r\n"])
def test_empty_input_fails(text):
    with pytest.raises(CsvParseError):
        _parse(text)


def test_parts_are_contiguous_and_consistent():
    text = "a;b\n1;2\n3;4\nc\n5\nd;e;f\n6;7;8\ng;h\n9;10\n"
    parts = _parse(text)
    assert [len(p.head) for p in parts] == [2, 1, 3, 2]
    for part in parts:
        assert len(part.head) == len(part.widths)
        assert part.first_line <= part.last_line
    for prev, nxt in zip(parts, parts[1:]):
        assert nxt.first_line == prev.last_line + 1
    assert parts[-1].last_line == 9


def test_spurious_row_is_not_merged_back():
    parts = _parse("a;b\n1;2\noops\n3;4\n")
    assert [(p.first_line, p.last_line) for p in parts] == [(1, 2), (3, 3), (4, 4)]
    assert parts[2].head == ['3', '4']


def test_widths_cover_every_body_value():
    rows = [["id", "text"], ["1", "short"], ["22", "a much longer value"], ["333", ""], ["4", "mid size"]]
    parts = _parse("".join(";".join(r) + "\n" for r in rows))
    widths = parts[0].widths
    for row in rows[1:]:
        for i, value in enumerate(row):
            assert widths[i] >= len(value)
    assert widths == [3, len("a much longer value")]


def test_header_length_not_counted_in_widths():
    parts = _parse("a very long header;b\nx;y\n")
    assert parts[0].widths == [1, 1]


def test_widths_count_characters_not_bytes():
    parts = _parse("város;x\nárvíztűrő;1\n")
    assert parts[0].widths == [9, 1]


def test_blank_lines_are_not_records():
    parts = _parse("a;b\n\n1;2\n\n\n3;4\n")
    assert len(parts) == 1
    assert parts[0].last_line == 3


def test_reader_dialect():
    reader = make_reader(io.StringIO('a; b;  c\nab"c;"quoted;value";x\n', newline=''))
    records = list(read_records(reader))
    assert records[0] == ['a', 'b', 'c']
    assert records[1] == ['ab"c', 'quoted;value', 'x']


def test_ragged_rows_are_allowed():
    reader = make_reader(io.StringIO("a;b;c\n1\n1;2;3;4\n", newline=''))
    assert [len(r) for r in read_records(reader)] == [3, 1, 4]


def test_replay_yields_body_rows_of_each_part():
    text = "a;b\n1;2\n3;4\nc\n5\n"
    parts = _parse(text)
    records = read_records(make_reader(io.StringIO(text, newline='')))
    replayed = [list(iter_part_rows(records, part)) for part in parts]
    assert replayed == [[['1', '2'], ['3', '4']], [['5']]]
    assert next(records, None) is None


def test_replay_of_truncated_input_fails():
    part = Part(first_line=1, last_line=4, head=['a', 'b'], widths=[1, 1])
    records = read_records(make_reader(io.StringIO("a;b\n1;2\n", newline='')))
    with pytest.raises(CsvParseError):
        list(iter_part_rows(records, part))


def test_replay_detects_changed_header():
    part = Part(first_line=1, last_line=1, head=['a', 'b'], widths=[0, 0])
    records = read_records(make_reader(io.StringIO("x;y\n", newline='')))
    with pytest.raises(CsvParseError) as exc:
        list(iter_part_rows(records, part))
    assert exc.value.line == 1
