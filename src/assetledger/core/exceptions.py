"""AssetLedger exception hierarchy."""

from __future__ import annotations


class AssetLedgerError(Exception):
    """Base exception for all AssetLedger errors."""


class ParseError(AssetLedgerError):
    """Uploaded content could not be read as a tabular dataset."""


class UnknownEntityError(AssetLedgerError):
    """No import schema is registered under the requested entity name."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"Unknown entity type: {entity!r}")


class PermissionDenied(AssetLedgerError):
    """Actor lacks the role required for the requested operation."""

    def __init__(self, actor_id: str, tenant_id: str, action: str) -> None:
        self.actor_id = actor_id
        self.tenant_id = tenant_id
        self.action = action
        super().__init__(f"User {actor_id} is not permitted to {action} in tenant {tenant_id}")


class PersistenceError(AssetLedgerError):
    """A backing store rejected or failed a read or write."""


class RecordNotFoundError(PersistenceError):
    """Record does not exist in the tenant's store."""

    def __init__(self, table: str, record_id: str) -> None:
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table} record {record_id!r} not found")


class DuplicateRecordError(PersistenceError):
    """A unique field value is already taken within the tenant."""

    def __init__(self, table: str, field: str, value: str) -> None:
        self.table = table
        self.field = field
        self.value = value
        super().__init__(f"{table}.{field} {value!r} already exists")


class AuditWriteError(AssetLedgerError):
    """Appending to the audit log failed."""


class PreviewNotFoundError(AssetLedgerError):
    """Import preview expired or was never created for this tenant."""

    def __init__(self, preview_id: str) -> None:
        self.preview_id = preview_id
        super().__init__(f"Import preview {preview_id!r} not found or expired")


class CacheError(AssetLedgerError):
    """Redis cache operation failed."""


class UnknownFieldError(AssetLedgerError):
    """A record patch names a field the entity schema does not define."""

    def __init__(self, entity: str, fields: list[str]) -> None:
        self.entity = entity
        self.fields = fields
        super().__init__(f"Unknown {entity} field(s): {', '.join(sorted(fields))}")
