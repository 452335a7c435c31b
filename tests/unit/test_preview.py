"""Tests for the preview projection shown before confirmation."""

from __future__ import annotations

from assetledger.importing.normalizer import validate
from assetledger.importing.parser import parse
from assetledger.importing.preview import project
from assetledger.models.schema import ASSET_SCHEMA


def _preview(rows: int = 3):
    body = "".join(f"A-{i},Item {i},IT,Ready,Green\n" for i in range(rows))
    return validate(parse("tag,name,category,status,status_color\n" + body), ASSET_SCHEMA)


class TestProject:
    def test_caps_displayed_rows(self):
        view = project(_preview(25))
        assert len(view.rows) == 10
        assert view.total_row_count == 25
        assert view.accepted_row_count == 25

    def test_custom_limit(self):
        assert len(project(_preview(5), limit=2).rows) == 2

    def test_groups_diagnostics_by_kind(self):
        view = project(_preview(3))
        assert list(view.diagnostics_by_kind) == ["CaseNormalized"]
        assert len(view.diagnostics_by_kind["CaseNormalized"]) == 6

    def test_flags_rewritten_columns_and_cells(self):
        view = project(_preview(1))
        assert view.rewritten_columns == ["status", "status_color"]
        first = view.rewrites[0]
        assert (first.row_index, first.column, first.raw_value, first.new_value) == (
            0, "status", "Ready", "ready",
        )

    def test_invalid_enum_rewrite_shows_default(self):
        preview = validate(parse("tag,name,category,status\nA-1,Laptop,IT,banana\n"), ASSET_SCHEMA)
        view = project(preview)
        assert view.rewrites[0].new_value == "ready"
        assert view.summary == "1 rows: 1 will be imported, 0 rejected, 1 with corrections"

    def test_raw_rows_are_not_rewritten(self):
        view = project(_preview(1))
        assert view.rows[0][3] == "Ready"

    def test_empty_upload(self):
        view = project(validate(parse("tag,name\n"), ASSET_SCHEMA))
        assert not view.valid
        assert view.summary == "No data rows found"
