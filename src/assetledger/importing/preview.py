"""Preview projector: the reviewable view of a validated upload."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from assetledger.models.validation import DiagnosticKind, PreviewResult, ValidationDiagnostic

DEFAULT_PREVIEW_ROWS = 10


class CellRewrite(BaseModel):
    """A cell whose stored value will differ from what the user uploaded."""

    row_index: int
    column: str
    raw_value: str
    new_value: Optional[str] = None


class PreviewProjection(BaseModel):
    entity: str
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)
    total_row_count: int = 0
    accepted_row_count: int = 0
    rejected_row_count: int = 0
    diagnostics_by_kind: dict[str, list[ValidationDiagnostic]] = Field(default_factory=dict)
    rewrites: list[CellRewrite] = Field(default_factory=list)
    rewritten_columns: list[str] = Field(default_factory=list)
    summary: str = ""
    valid: bool = False


def _summary(preview: PreviewResult, flagged_rows: int) -> str:
    if not preview.valid:
        return "No data rows found"
    text = (
        f"{preview.total_row_count} rows: {preview.accepted_row_count} will be imported, "
        f"{preview.rejected_row_count} rejected"
    )
    if flagged_rows:
        text += f", {flagged_rows} with corrections"
    return text


def project(preview: PreviewResult, limit: int = DEFAULT_PREVIEW_ROWS) -> PreviewProjection:
    """Project a preview for display. Shows at most ``limit`` raw rows."""
    by_kind: dict[str, list[ValidationDiagnostic]] = {}
    for diagnostic in preview.diagnostics:
        by_kind.setdefault(diagnostic.kind.value, []).append(diagnostic)

    rewrites: list[CellRewrite] = []
    columns: list[str] = []
    for diagnostic in preview.diagnostics:
        if diagnostic.kind is DiagnosticKind.MISSING_REQUIRED and not diagnostic.replacement:
            continue
        if diagnostic.replacement == diagnostic.raw_value:
            continue
        rewrites.append(
            CellRewrite(
                row_index=diagnostic.row_index,
                column=diagnostic.column_name,
                raw_value=diagnostic.raw_value,
                new_value=diagnostic.replacement,
            )
        )
        if diagnostic.column_name not in columns:
            columns.append(diagnostic.column_name)

    flagged_rows = len({d.row_index for d in preview.diagnostics})
    return PreviewProjection(
        entity=preview.entity,
        headers=list(preview.dataset.headers),
        rows=[list(r) for r in preview.dataset.rows[:limit]],
        total_row_count=preview.total_row_count,
        accepted_row_count=preview.accepted_row_count,
        rejected_row_count=preview.rejected_row_count,
        diagnostics_by_kind=by_kind,
        rewrites=rewrites,
        rewritten_columns=columns,
        summary=_summary(preview, flagged_rows),
        valid=preview.valid,
    )
