"""Delimited-text output: import templates, exports and dataset re-rendering.

Uses the same quoting rule the parser reads, so ``parse(format_csv(...))``
reproduces the values it was given.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from assetledger.importing.parser import DELIMITER, QUOTE
from assetledger.models.dataset import TabularDataset
from assetledger.models.schema import EntitySchema

_NEEDS_QUOTES = (DELIMITER, QUOTE, "\r", "\n")


def format_value(value: Any) -> str:
    """Plain-text form of a stored value (``None`` -> empty)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _quote(value: str, lone: bool) -> str:
    # A lone blank cell would otherwise read back as a blank line and be dropped.
    if any(token in value for token in _NEEDS_QUOTES) or (lone and not value.strip()):
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def format_row(cells: Sequence[str]) -> str:
    lone = len(cells) == 1
    return DELIMITER.join(_quote(cell, lone) for cell in cells)


def format_csv(headers: Sequence[str], rows: Iterable[Sequence[str]] = ()) -> str:
    """Render a header row and data rows, one line each, ``\\n``-terminated."""
    lines = [format_row(headers)]
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines) + "\n"


def format_dataset(dataset: TabularDataset) -> str:
    return format_csv(dataset.headers, dataset.rows)


def generate_template(schema: EntitySchema) -> str:
    """Blank import template: the canonical header line and no data rows."""
    return format_csv(schema.field_names)


def export_records(schema: EntitySchema, records: Iterable[dict[str, Any]]) -> str:
    """Stored records in canonical column order, re-importable as-is."""
    names = schema.field_names
    return format_csv(names, ([format_value(r.get(n)) for n in names] for r in records))
