"""Change-audit recorder: one history entry per changed field."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from assetledger.core.exceptions import AuditWriteError
from assetledger.core.logging import get_logger
from assetledger.core.protocols import IAuditStore
from assetledger.importing.writer import format_value
from assetledger.models.audit import AuditRecord
from assetledger.models.membership import Actor

logger = get_logger(__name__)

_MISSING = object()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def diff_changes(
    previous: Mapping[str, Any], next: Mapping[str, Any]
) -> list[tuple[str, Optional[str], str]]:
    """``(field, old, new)`` for every field in ``next`` whose text differs.

    A key missing from ``next`` was not provided and is never reported. A key
    present with ``None`` was explicitly cleared and compares as ``""``.
    """
    changes: list[tuple[str, Optional[str], str]] = []
    for field, new in next.items():
        old = previous.get(field, _MISSING)
        old_text = None if old is _MISSING or old is None else format_value(old)
        new_text = format_value(new)
        if (old_text or "") != new_text:
            changes.append((field, old_text, new_text))
    return changes


class ChangeAuditRecorder:
    """Appends field-level history for every successful mutation.

    Replaying the same change twice records it twice; the log is a ledger,
    not a state snapshot.
    """

    def __init__(
        self, audit_store: IAuditStore, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self._store = audit_store
        self._clock = clock

    def record_changes(
        self,
        entity_id: str,
        previous: Mapping[str, Any],
        next: Mapping[str, Any],
        actor: Actor,
        tenant_id: Optional[str] = None,
        labels: Optional[Mapping[str, str]] = None,
    ) -> list[AuditRecord]:
        """Diff, append and return the audit entries for one mutation.

        Append failures are logged and skipped: the mutation has already
        committed and is not rolled back.
        """
        labels = labels or {}
        timestamp = self._clock()
        records = [
            AuditRecord(
                tenant_id=tenant_id,
                entity_id=entity_id,
                field_name=labels.get(field, field),
                old_value=old,
                new_value=new,
                actor_id=actor.id,
                actor_display_name=actor.display_name,
                timestamp=timestamp,
            )
            for field, old, new in diff_changes(previous, next)
        ]

        for record in records:
            try:
                self._store.append(record)
            except AuditWriteError as exc:
                logger.warning(
                    "audit_write_failed",
                    entity_id=entity_id,
                    field_name=record.field_name,
                    error=str(exc),
                )
        return records

    def history(self, entity_id: str) -> list[AuditRecord]:
        """Audit entries for ``entity_id``, oldest first."""
        return sorted(self._store.list_for_entity(entity_id), key=lambda r: r.timestamp)
