"""Tests for the tabular parser (delimited text and xlsx)."""

from __future__ import annotations

import io
from datetime import date, datetime

import pytest
from openpyxl import Workbook

from assetledger.core.exceptions import ParseError
from assetledger.importing.parser import parse, parse_binary, stringify_cell


def _xlsx(*sheets: list[list]) -> bytes:
    wb = Workbook()
    wb.remove(wb.active)
    for idx, rows in enumerate(sheets):
        ws = wb.create_sheet(f"Sheet{idx + 1}")
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class TestParseText:
    def test_first_row_is_headers(self):
        ds = parse("tag,name\nA-1,Laptop\nA-2,Monitor\n")
        assert ds.headers == ["tag", "name"]
        assert ds.rows == [["A-1", "Laptop"], ["A-2", "Monitor"]]

    def test_preserves_whitespace(self):
        ds = parse("name, status \n  Laptop , Ready\n")
        assert ds.headers == ["name", " status "]
        assert ds.rows == [["  Laptop ", " Ready"]]

    def test_quoted_delimiter_and_newline(self):
        ds = parse('name,notes\n"Desk, standing","line one\nline two"\n')
        assert ds.rows == [["Desk, standing", "line one\nline two"]]

    def test_escaped_quote(self):
        ds = parse('name\n"27"" monitor"\n')
        assert ds.rows == [['27" monitor']]

    def test_empty_quoted_field(self):
        ds = parse('a,b,c\n1,"",3\n')
        assert ds.rows == [["1", "", "3"]]

    def test_crlf_and_cr_line_endings(self):
        assert parse("a,b\r\n1,2\r\n").rows == [["1", "2"]]
        assert parse("a,b\r1,2\r").rows == [["1", "2"]]

    def test_drops_blank_and_whitespace_lines(self):
        ds = parse("a,b\n1,2\n\n   \n3,4\n\n")
        assert ds.rows == [["1", "2"], ["3", "4"]]

    def test_strips_bom(self):
        ds = parse("\ufefftag,name\nA-1,Laptop\n")
        assert ds.headers == ["tag", "name"]

    def test_ragged_rows_kept_as_is(self):
        ds = parse("a,b,c\n1\n1,2,3,4\n")
        assert ds.rows == [["1"], ["1", "2", "3", "4"]]
        assert ds.cell(0, 2) == ""

    def test_unterminated_quote_is_flushed(self):
        ds = parse('name,notes\nLaptop,"never closed\nmore text')
        assert ds.rows == [["Laptop", "never closed\nmore text"]]

    @pytest.mark.parametrize("raw", ["", "\n\n", "   ", '"'])
    def test_degenerate_input_never_raises(self, raw):
        ds = parse(raw)
        assert ds.rows == []

    def test_header_only(self):
        ds = parse("tag,name\n")
        assert ds.headers == ["tag", "name"]
        assert ds.rows == []
        assert ds.is_empty


class TestParseBinary:
    def test_reads_first_sheet(self):
        data = _xlsx([["tag", "name", "qty"], ["A-1", "Laptop", 3]])
        ds = parse_binary(data)
        assert ds.headers == ["tag", "name", "qty"]
        assert ds.rows == [["A-1", "Laptop", "3"]]

    def test_selects_sheet_by_index(self):
        data = _xlsx([["a"], ["1"]], [["b"], ["2"]])
        assert parse_binary(data, sheet_index=1).headers == ["b"]

    def test_missing_sheet_raises(self):
        with pytest.raises(ParseError):
            parse_binary(_xlsx([["a"]]), sheet_index=3)

    def test_none_cells_become_empty(self):
        data = _xlsx([["tag", "name", "notes"], ["A-1", None, "x"]])
        assert parse_binary(data).rows == [["A-1", "", "x"]]

    def test_skips_empty_rows(self):
        data = _xlsx([["tag"], [None], ["A-1"]])
        assert parse_binary(data).rows == [["A-1"]]

    def test_garbage_bytes_raise_parse_error(self):
        with pytest.raises(ParseError):
            parse_binary(b"this is not a workbook")


class TestStringifyCell:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, ""),
            ("text", "text"),
            (True, "true"),
            (4.0, "4"),
            (4.5, "4.5"),
            (7, "7"),
            (datetime(2024, 1, 2), "2024-01-02"),
            (datetime(2024, 1, 2, 9, 30), "2024-01-02 09:30:00"),
            (date(2024, 1, 2), "2024-01-02"),
        ],
    )
    def test_values(self, value, expected):
        assert stringify_cell(value) == expected
