"""Tabular parser: delimited text or spreadsheet bytes into a TabularDataset.

Parsing never judges content. Every cell comes out as a string, the first
non-blank row is the header, and malformed quoting is tolerated so that bad
uploads surface as validation diagnostics instead of parse failures.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Iterator
from datetime import date, datetime, time
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from assetledger.core.exceptions import ParseError
from assetledger.models.dataset import TabularDataset

DELIMITER = ","
QUOTE = '"'
BOM = "\ufeff"


def _scan(text: str) -> Iterator[tuple[list[str], bool]]:
    """Yield ``(cells, saw_quote)`` for every physical record in ``text``.

    A doubled quote emits a literal quote unless it opens an empty field
    (``a,"",b``). A delimiter or line break inside quotes is kept as text.
    An unterminated quote swallows the rest of the input into one field.
    """
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    saw_quote = False
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        if ch == QUOTE:
            saw_quote = True
            if i + 1 < n and text[i + 1] == QUOTE and (in_quotes or field):
                field.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif in_quotes:
            field.append(ch)
        elif ch == DELIMITER:
            row.append("".join(field))
            field = []
        elif ch in "\r\n":
            row.append("".join(field))
            yield row, saw_quote
            row, field, saw_quote = [], [], False
            if ch == "\r" and i + 1 < n and text[i + 1] == "\n":
                i += 1
        else:
            field.append(ch)
        i += 1

    if field or row or saw_quote:
        row.append("".join(field))
        yield row, saw_quote


def _is_blank(cells: list[str], saw_quote: bool) -> bool:
    return not saw_quote and len(cells) == 1 and not cells[0].strip()


def parse(raw: str) -> TabularDataset:
    """Parse comma-separated text. Never raises on malformed quoting."""
    if raw.startswith(BOM):
        raw = raw[len(BOM):]
    records = [cells for cells, quoted in _scan(raw) if not _is_blank(cells, quoted)]
    if not records:
        return TabularDataset()
    return TabularDataset(headers=records[0], rows=records[1:])


def stringify_cell(value: Any) -> str:
    """Render a spreadsheet cell the way a user would have typed it."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value)


def _trim_row(cells: list[str]) -> list[str]:
    end = len(cells)
    while end and cells[end - 1] == "":
        end -= 1
    return cells[:end]


def parse_binary(data: bytes, sheet_index: int = 0) -> TabularDataset:
    """Parse an ``.xlsx`` workbook; the chosen sheet's first row is the header.

    Raises:
        ParseError: the bytes are not a readable workbook or the sheet is missing.
    """
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as exc:
        raise ParseError(f"Unreadable spreadsheet: {exc}") from exc

    try:
        sheets = workbook.worksheets
        if not 0 <= sheet_index < len(sheets):
            raise ParseError(f"Workbook has no sheet at index {sheet_index}")
        records = []
        for values in sheets[sheet_index].iter_rows(values_only=True):
            cells = _trim_row([stringify_cell(v) for v in values])
            if cells:
                records.append(cells)
    finally:
        workbook.close()

    if not records:
        return TabularDataset()
    return TabularDataset(headers=records[0], rows=records[1:])
