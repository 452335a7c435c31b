"""Protocol interfaces for all AssetLedger abstractions.

All inter-layer communication uses these Protocols: structural typing,
no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from assetledger.models.audit import AuditRecord
    from assetledger.models.membership import Profile, TenantMembership


# ---------------------------------------------------------------------------
# Persistence: Record Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IRecordStore(Protocol):
    """Tenant-scoped store for asset, employee and warehouse records.

    Every call carries the tenant id; a record is never visible outside the
    tenant it was inserted into.
    """

    def insert(self, tenant_id: str, table: str, record: dict[str, Any]) -> dict[str, Any]: ...

    def update(
        self, tenant_id: str, table: str, record_id: str, patch: dict[str, Any]
    ) -> dict[str, Any]: ...

    def get(self, tenant_id: str, table: str, record_id: str) -> dict[str, Any] | None: ...

    def select(
        self, tenant_id: str, table: str, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    def delete(self, tenant_id: str, table: str, record_id: str) -> None: ...


# ---------------------------------------------------------------------------
# Persistence: Audit Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IAuditStore(Protocol):
    """Append-only field change history."""

    def append(self, record: AuditRecord) -> None: ...

    def list_for_entity(self, entity_id: str) -> list[AuditRecord]: ...


# ---------------------------------------------------------------------------
# Tenant Directory
# ---------------------------------------------------------------------------

@runtime_checkable
class IDirectory(Protocol):
    """Source of truth for user profiles and tenant memberships."""

    def get_membership(self, user_id: str, tenant_id: str) -> TenantMembership | None: ...

    def get_profile(self, user_id: str) -> Profile | None: ...


# ---------------------------------------------------------------------------
# Persistence: Cache Backend
# ---------------------------------------------------------------------------

@runtime_checkable
class ICacheBackend(Protocol):
    """Redis-compatible cache interface."""

    def get(self, key: str) -> str | None: ...

    def setex(self, key: str, ttl: int, value: str) -> None: ...

    def delete(self, key: str) -> None: ...
