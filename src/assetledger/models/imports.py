"""Batch import outcome models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RowOutcome(BaseModel):
    """Result of attempting to persist one data row."""

    row_index: int
    identifier: str = ""  # name or tag shown back to the user
    success: bool
    error: Optional[str] = None
    record_id: Optional[str] = None


class ImportReport(BaseModel):
    """Aggregated outcomes of one import attempt.

    ``skipped`` lists rows excluded before persistence because every identity
    field was blank; they are not failures.
    """

    succeeded: list[RowOutcome] = Field(default_factory=list)
    failed: list[RowOutcome] = Field(default_factory=list)
    skipped: list[int] = Field(default_factory=list)

    @property
    def attempted_count(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def add(self, outcome: RowOutcome) -> None:
        (self.succeeded if outcome.success else self.failed).append(outcome)

    def summary(self) -> str:
        text = f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"
        if self.skipped:
            text += f", {len(self.skipped)} skipped"
        return text
