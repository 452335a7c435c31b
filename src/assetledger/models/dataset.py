"""Parsed tabular data: header row plus string-only data rows."""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

_HEADER_SEPARATORS = re.compile(r"[\s\-]+")


def normalize_header(header: str) -> str:
    """Canonical lookup key for a header: ``" Purchase Date "`` -> ``purchase_date``."""
    return _HEADER_SEPARATORS.sub("_", header.strip().lower())


class TabularDataset(BaseModel):
    """Headers and rows exactly as read from the upload.

    Rows may be shorter or longer than the header row. Missing cells read as
    empty strings and surplus cells are never reachable by column name.
    """

    model_config = {"frozen": True}

    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(h.strip() for h in self.headers) or not self.rows

    def column_index(self, *names: str) -> int | None:
        """Index of the first header matching any of ``names`` after normalization."""
        wanted = {normalize_header(n) for n in names}
        for idx, header in enumerate(self.headers):
            if normalize_header(header) in wanted:
                return idx
        return None

    def cell(self, row_index: int, column: int) -> str:
        row = self.rows[row_index]
        return row[column] if column < len(row) else ""
