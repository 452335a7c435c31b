"""Field normalizer / validator.

Permissive by policy: a miscased or unknown enum value, an unparseable
number or date, or a missing required value degrades to the field default
and is reported as a diagnostic. Only fields marked ``fatal`` can reject a
row, and none of the shipped schemas mark any.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from assetledger.core.exceptions import UnknownFieldError
from assetledger.importing.writer import format_value
from assetledger.models.dataset import TabularDataset, normalize_header
from assetledger.models.schema import EntitySchema, FieldSchema, FieldType
from assetledger.models.validation import (
    DiagnosticKind,
    NormalizedRow,
    PreviewResult,
    ValidationDiagnostic,
)

_TYPE_NAMES = {
    FieldType.INTEGER: "a whole number",
    FieldType.DECIMAL: "a number",
    FieldType.DATE: "a date (YYYY-MM-DD)",
}


class _Mismatch(ValueError):
    pass


def resolve_columns(dataset: TabularDataset, schema: EntitySchema) -> dict[str, int | None]:
    """Map each schema field to its source column; canonical names beat aliases."""
    columns: dict[str, int | None] = {}
    for field in schema.fields:
        columns[field.name] = None
        for name in field.header_names:
            idx = dataset.column_index(name)
            if idx is not None:
                columns[field.name] = idx
                break
    return columns


def _parse_number(value: str, field: FieldSchema) -> Decimal:
    try:
        number = Decimal(value.replace(",", "").lstrip("$"))
    except InvalidOperation:
        raise _Mismatch(value) from None
    if not number.is_finite():
        raise _Mismatch(value)
    if field.minimum is not None and number < field.minimum:
        raise _Mismatch(value)
    return number


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        raise _Mismatch(value) from None


def _coerce(field: FieldSchema, value: str) -> Any:
    if field.type is FieldType.INTEGER:
        number = _parse_number(value, field)
        if number != number.to_integral_value():
            raise _Mismatch(value)
        return int(number)
    if field.type is FieldType.DECIMAL:
        return _parse_number(value, field)
    if field.type is FieldType.DATE:
        return _parse_date(value)
    return value


def coerce_cell(
    field: FieldSchema, raw: str, row_index: int, column_name: str | None = None
) -> tuple[Any, ValidationDiagnostic | None]:
    """Coerce one raw cell to the field's type, returning a diagnostic if it was rewritten."""
    column = column_name or field.name
    row_label = f"Row {row_index + 1}"
    value = raw.strip() if field.strip else raw

    def note(kind: DiagnosticKind, message: str, replacement: Any) -> ValidationDiagnostic:
        return ValidationDiagnostic(
            row_index=row_index,
            column_name=column,
            raw_value=raw,
            kind=kind,
            message=message,
            replacement=format_value(replacement),
            fatal=field.fatal and kind is not DiagnosticKind.CASE_NORMALIZED,
        )

    if not value.strip():
        if field.required:
            return field.default, note(
                DiagnosticKind.MISSING_REQUIRED,
                f'{row_label}: Missing required value for "{field.name}"',
                field.default,
            )
        return field.default, None

    if field.type is FieldType.ENUM:
        if value in field.choices:
            return value, None
        if value.lower() in field.choices:
            return value.lower(), note(
                DiagnosticKind.CASE_NORMALIZED,
                f'{row_label}: {field.display_name} "{raw}" normalized to "{value.lower()}"',
                value.lower(),
            )
        # "Low Stock" and "low-stock" both resolve to low_stock
        canonical = normalize_header(value)
        if canonical in field.choices:
            return canonical, note(
                DiagnosticKind.CASE_NORMALIZED,
                f'{row_label}: {field.display_name} "{raw}" normalized to "{canonical}" '
                "(case and separators rewritten)",
                canonical,
            )
        return field.default, note(
            DiagnosticKind.INVALID_ENUM,
            f'{row_label}: Invalid {field.display_name.lower()} "{raw}". '
            f"Valid options: {', '.join(field.choices)}",
            field.default,
        )

    try:
        return _coerce(field, value), None
    except _Mismatch:
        expected = _TYPE_NAMES.get(field.type, field.type.value)
        if field.minimum is not None:
            expected += f" not below {field.minimum}"
        return field.default, note(
            DiagnosticKind.TYPE_MISMATCH,
            f'{row_label}: {field.display_name} must be {expected}, got "{raw}"',
            field.default,
        )


def normalize_row(
    dataset: TabularDataset,
    row_index: int,
    schema: EntitySchema,
    columns: dict[str, int | None] | None = None,
) -> tuple[NormalizedRow, list[ValidationDiagnostic]]:
    """Build the canonical typed row for ``dataset.rows[row_index]``."""
    if columns is None:
        columns = resolve_columns(dataset, schema)

    values: dict[str, Any] = {}
    diagnostics: list[ValidationDiagnostic] = []
    for field in schema.fields:
        idx = columns.get(field.name)
        if idx is None:
            raw, column_name = "", field.name
        else:
            raw, column_name = dataset.cell(row_index, idx), dataset.headers[idx]
        value, diagnostic = coerce_cell(field, raw, row_index, column_name)
        values[field.name] = value
        if diagnostic is not None:
            diagnostics.append(diagnostic)

    rejected = any(d.fatal for d in diagnostics)
    return NormalizedRow(row_index=row_index, values=values, rejected=rejected), diagnostics


def validate(dataset: TabularDataset, schema: EntitySchema) -> PreviewResult:
    """Normalize every row of ``dataset`` against ``schema``. Pure."""
    if dataset.is_empty:
        return PreviewResult(entity=schema.name, dataset=dataset, valid=False)

    columns = resolve_columns(dataset, schema)
    rows: list[NormalizedRow] = []
    diagnostics: list[ValidationDiagnostic] = []
    for row_index in range(len(dataset.rows)):
        row, row_diagnostics = normalize_row(dataset, row_index, schema, columns)
        rows.append(row)
        diagnostics.extend(row_diagnostics)

    rejected = sum(1 for r in rows if r.rejected)
    return PreviewResult(
        entity=schema.name,
        dataset=dataset,
        rows=rows,
        diagnostics=diagnostics,
        valid=True,
        accepted_row_count=len(rows) - rejected,
        rejected_row_count=rejected,
    )


def normalize_values(
    schema: EntitySchema, values: dict[str, Any]
) -> tuple[dict[str, Any], list[ValidationDiagnostic]]:
    """Coerce a partial record (manual edit) with the same permissive rules.

    Only the keys present in ``values`` are returned. ``None`` clears a field.

    Raises:
        UnknownFieldError: a key is not a field of ``schema``.
    """
    unknown = [k for k in values if k not in schema.field_names]
    if unknown:
        raise UnknownFieldError(schema.name, unknown)

    out: dict[str, Any] = {}
    diagnostics: list[ValidationDiagnostic] = []
    for name, value in values.items():
        field = schema.field(name)
        if value is None and not field.required:
            out[name] = None
            continue
        raw = value if isinstance(value, str) else format_value(value)
        coerced, diagnostic = coerce_cell(field, raw, 0)
        out[name] = coerced
        if diagnostic is not None:
            diagnostics.append(diagnostic)
    return out, diagnostics
