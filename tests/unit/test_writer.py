"""Tests for template generation, export and the quoting round trip."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from assetledger.importing.parser import parse
from assetledger.importing.writer import (
    export_records,
    format_csv,
    format_dataset,
    format_value,
    generate_template,
)
from assetledger.models.schema import ASSET_SCHEMA, EMPLOYEE_SCHEMA


class TestTemplate:
    def test_asset_template_is_one_header_line(self):
        text = generate_template(ASSET_SCHEMA)
        assert text.count("\n") == 1
        assert text.startswith("tag,name,category,status,")

    def test_template_reparses_to_zero_rows(self):
        ds = parse(generate_template(ASSET_SCHEMA))
        assert ds.rows == []
        assert ds.headers == ASSET_SCHEMA.field_names

    def test_employee_template_columns(self):
        assert generate_template(EMPLOYEE_SCHEMA) == "name,email,role,department,hire_date\n"


class TestFormatCsv:
    def test_quotes_only_when_needed(self):
        text = format_csv(["a", "b"], [["plain", "has, comma"], ['say "hi"', "two\nlines"]])
        assert text == 'a,b\nplain,"has, comma"\n"say ""hi""","two\nlines"\n'

    def test_round_trip_preserves_values(self):
        raw = (
            'tag,name,notes\n'
            'A-1,"Desk, standing","He said ""ok"""\n'
            'A-2,,"multi\nline"\n'
            '"",Chair,\n'
        )
        first = parse(raw)
        again = parse(format_dataset(first))
        assert again == first

    def test_lone_blank_cell_survives_round_trip(self):
        first = parse('notes\n" "\nx\n')
        assert first.rows == [[" "], ["x"]]
        assert parse(format_dataset(first)) == first


class TestExport:
    def test_renders_typed_values_in_schema_order(self):
        record = {
            "id": "r1", "tag": "A-1", "name": "Laptop", "category": "IT", "status": "ready",
            "purchase_date": date(2024, 3, 1), "purchase_cost": Decimal("1299.50"), "qty": 2,
            "notes": None,
        }
        text = export_records(ASSET_SCHEMA, [record])
        header, row = text.splitlines()
        values = dict(zip(header.split(","), row.split(",")))
        assert values["purchase_date"] == "2024-03-01"
        assert values["purchase_cost"] == "1299.50"
        assert values["qty"] == "2"
        assert values["notes"] == ""
        assert "id" not in values

    def test_format_value(self):
        assert format_value(None) == ""
        assert format_value(False) == "false"
        assert format_value(Decimal("1E+2")) == "100"
