"""Single-record create and edit flow with audit history."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from assetledger.access.guard import AuthorizationGuard
from assetledger.audit.recorder import ChangeAuditRecorder
from assetledger.core.exceptions import PersistenceError, RecordNotFoundError
from assetledger.core.logging import get_logger
from assetledger.core.protocols import IRecordStore
from assetledger.importing.importer import generate_tag
from assetledger.importing.normalizer import normalize_values
from assetledger.models.audit import AuditRecord
from assetledger.models.membership import Actor
from assetledger.models.schema import EntitySchema
from assetledger.models.validation import ValidationDiagnostic

logger = get_logger(__name__)

_BOOKKEEPING = frozenset({"id", "tenant_id", "user_id", "created_at", "updated_at"})


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordService:
    """Manual edits share the importer's guard, normalizer and audit trail.

    Errors are not accumulated here: a denied or failed edit raises straight
    back to the caller.
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

    def create_record(
        self,
        schema: EntitySchema,
        actor: Actor,
        tenant_id: str,
        values: dict[str, Any],
    ) -> tuple[dict[str, Any], list[ValidationDiagnostic]]:
        """Create one record owned by ``actor``.

        Raises:
            PermissionDenied: actor lacks ``schema.required_role`` in the tenant.
            UnknownFieldError: ``values`` names a field the schema lacks.
            PersistenceError: the store rejected the insert.
        """
        self._guard.require(actor, tenant_id, schema.required_role, f"create {schema.name}")
        self._guard.require_mutation(actor, tenant_id, actor.id, f"create {schema.name}")

        normalized, diagnostics = normalize_values(schema, values)
        # Fields the caller left out take their schema defaults.
        for field in schema.fields:
            normalized.setdefault(field.name, field.default)
        if schema.placeholder_name and not normalized.get("name"):
            normalized["name"] = schema.placeholder_name
        if schema.tag_prefix and not normalized.get("tag"):
            normalized["tag"] = generate_tag(schema.tag_prefix)

        now = self._clock().isoformat()
        try:
            record = schema.record_model(
                **normalized,
                id=str(uuid.uuid4()),
                tenant_id=tenant_id,
                user_id=actor.id,
                created_at=now,
                updated_at=now,
            ).model_dump()
        except ValidationError as exc:
            raise PersistenceError(f"Invalid {schema.name} record: {exc}") from exc

        stored = self._store.insert(tenant_id, schema.table, record)
        self._recorder.record_changes(
            stored["id"], {}, normalized, actor, tenant_id=tenant_id, labels=schema.labels,
        )
        logger.info("record_created", entity=schema.name, record_id=stored["id"], actor_id=actor.id)
        return stored, diagnostics

    def update_record(
        self,
        schema: EntitySchema,
        actor: Actor,
        tenant_id: str,
        record_id: str,
        patch: dict[str, Any],
    ) -> tuple[dict[str, Any], list[ValidationDiagnostic]]:
        """Apply ``patch`` to an existing record and audit what changed.

        Raises:
            RecordNotFoundError: no such record in the tenant.
            PermissionDenied: actor neither owns the record nor is admin-equivalent.
            UnknownFieldError: ``patch`` names a field the schema lacks.
            PersistenceError: the store rejected the update.
        """
        current = self._store.get(tenant_id, schema.table, record_id)
        if current is None:
            raise RecordNotFoundError(schema.table, record_id)

        self._guard.require(actor, tenant_id, schema.required_role, f"edit {schema.name}")
        self._guard.require_mutation(
            actor, tenant_id, current.get("user_id"), f"edit {schema.name}"
        )

        changes, diagnostics = normalize_values(
            schema, {k: v for k, v in patch.items() if k not in _BOOKKEEPING}
        )
        try:
            schema.record_model(**{**current, **changes})
        except ValidationError as exc:
            raise PersistenceError(f"Invalid {schema.name} record: {exc}") from exc

        updated = self._store.update(
            tenant_id,
            schema.table,
            record_id,
            {**changes, "updated_at": self._clock().isoformat()},
        )
        self._recorder.record_changes(
            record_id, current, changes, actor, tenant_id=tenant_id, labels=schema.labels,
        )
        logger.info(
            "record_updated",
            entity=schema.name,
            record_id=record_id,
            actor_id=actor.id,
            fields=sorted(changes),
        )
        return updated, diagnostics

    def history(self, entity_id: str) -> list[AuditRecord]:
        return self._recorder.history(entity_id)
