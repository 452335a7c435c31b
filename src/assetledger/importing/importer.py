"""Batch importer: best-effort, row-by-row commit of a confirmed upload."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from assetledger.access.guard import AuthorizationGuard
from assetledger.audit.recorder import ChangeAuditRecorder
from assetledger.core.exceptions import AssetLedgerError
from assetledger.core.logging import get_logger
from assetledger.core.protocols import IRecordStore
from assetledger.importing.normalizer import normalize_row, resolve_columns
from assetledger.models.dataset import TabularDataset
from assetledger.models.imports import ImportReport, RowOutcome
from assetledger.models.membership import Actor
from assetledger.models.schema import EntitySchema

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_tag(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def identifier_for(schema: EntitySchema, values: dict[str, Any]) -> str:
    """First non-blank identity value, used to label the row in reports."""
    for name in schema.identity_fields:
        if not _is_blank(values.get(name)):
            return str(values[name])
    return ""


def is_structurally_rejected(schema: EntitySchema, values: dict[str, Any]) -> bool:
    """True when every identity field of the row is blank."""
    return all(_is_blank(values.get(name)) for name in schema.identity_fields)


class BatchImporter:
    """Commits rows one at a time and reports per-row outcomes.

    No cross-row transaction: a failure on one row never aborts the rest,
    and rows committed before a crash stay committed.
    """

    def __init__(
        self,
        store: IRecordStore,
        guard: AuthorizationGuard,
        recorder: ChangeAuditRecorder,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._guard = guard
        self._recorder = recorder
        self._clock = clock

    def import_rows(
        self,
        dataset: TabularDataset,
        schema: EntitySchema,
        actor: Actor,
        tenant_id: str,
    ) -> ImportReport:
        """Normalize, authorize, persist and audit every row of ``dataset``."""
        report = ImportReport()
        if dataset.is_empty:
            return report

        columns = resolve_columns(dataset, schema)
        for row_index in range(len(dataset.rows)):
            # Re-normalized here so a stale preview cannot bypass the schema.
            row, _ = normalize_row(dataset, row_index, schema, columns)
            if is_structurally_rejected(schema, row.values):
                report.skipped.append(row_index)
                continue

            identifier = identifier_for(schema, row.values)
            if row.rejected:
                report.add(RowOutcome(
                    row_index=row_index, identifier=identifier, success=False,
                    error="Row has invalid values",
                ))
                continue

            report.add(self._import_row(row_index, identifier, row.values, schema, actor, tenant_id))

        logger.info(
            "import_completed",
            entity=schema.name,
            tenant_id=tenant_id,
            actor_id=actor.id,
            succeeded=len(report.succeeded),
            failed=len(report.failed),
            skipped=len(report.skipped),
        )
        return report

    def _import_row(
        self,
        row_index: int,
        identifier: str,
        values: dict[str, Any],
        schema: EntitySchema,
        actor: Actor,
        tenant_id: str,
    ) -> RowOutcome:
        try:
            self._guard.require(actor, tenant_id, schema.required_role, f"import {schema.name}")
            self._guard.require_mutation(actor, tenant_id, actor.id, f"import {schema.name}")

            values = self._apply_fallbacks(schema, values)
            now = self._clock().isoformat()
            record = schema.record_model(
                **values,
                id=str(uuid.uuid4()),
                tenant_id=tenant_id,
                user_id=actor.id,
                created_at=now,
                updated_at=now,
            ).model_dump()
            stored = self._store.insert(tenant_id, schema.table, record)
        except (AssetLedgerError, ValidationError) as exc:
            logger.warning(
                "import_row_failed",
                entity=schema.name,
                row_index=row_index,
                identifier=identifier,
                error=str(exc),
            )
            return RowOutcome(
                row_index=row_index, identifier=identifier, success=False, error=str(exc),
            )

        self._recorder.record_changes(
            stored["id"], {}, values, actor, tenant_id=tenant_id, labels=schema.labels,
        )
        return RowOutcome(
            row_index=row_index,
            identifier=identifier_for(schema, values),
            success=True,
            record_id=stored["id"],
        )

    @staticmethod
    def _apply_fallbacks(schema: EntitySchema, values: dict[str, Any]) -> dict[str, Any]:
        values = dict(values)
        if schema.placeholder_name and _is_blank(values.get("name")):
            values["name"] = schema.placeholder_name
        if schema.tag_prefix and _is_blank(values.get("tag")):
            values["tag"] = generate_tag(schema.tag_prefix)
        return values
