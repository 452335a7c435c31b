"""Validation diagnostics and the pre-commit preview result."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field

from assetledger.models.dataset import TabularDataset


class DiagnosticKind(StrEnum):
    CASE_NORMALIZED = "CaseNormalized"
    INVALID_ENUM = "InvalidEnum"
    MISSING_REQUIRED = "MissingRequired"
    TYPE_MISMATCH = "TypeMismatch"


class ValidationDiagnostic(BaseModel):
    """A note about one cell that was rewritten, defaulted or found missing."""

    row_index: int
    column_name: str
    raw_value: str = ""
    kind: DiagnosticKind
    message: str
    replacement: Optional[str] = None  # stringified value that will be stored
    fatal: bool = False


class NormalizedRow(BaseModel):
    """Canonical, typed values for one data row."""

    row_index: int
    values: dict[str, Any] = Field(default_factory=dict)
    rejected: bool = False


class PreviewResult(BaseModel):
    """Everything a human needs to review before confirming an import."""

    entity: str
    dataset: TabularDataset
    rows: list[NormalizedRow] = Field(default_factory=list)
    diagnostics: list[ValidationDiagnostic] = Field(default_factory=list)
    valid: bool = False
    accepted_row_count: int = 0
    rejected_row_count: int = 0

    @property
    def total_row_count(self) -> int:
        return len(self.dataset.rows)

    def diagnostics_for_row(self, row_index: int) -> list[ValidationDiagnostic]:
        return [d for d in self.diagnostics if d.row_index == row_index]
