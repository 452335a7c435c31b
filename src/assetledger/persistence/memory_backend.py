"""In-memory backends for unit tests and local dev: dict-backed fakes."""

from __future__ import annotations

import copy
from typing import Any

from assetledger.core.exceptions import DuplicateRecordError, RecordNotFoundError
from assetledger.models.audit import AuditRecord
from assetledger.models.membership import Profile, TenantMembership
from assetledger.models.schema import unique_fields_by_table


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class MemoryRecordStore:
    """Dict-backed IRecordStore keyed by tenant, table and record id."""

    def __init__(self, unique_fields: dict[str, tuple[str, ...]] | None = None) -> None:
        self._tables: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self._unique = unique_fields_by_table() if unique_fields is None else unique_fields

    def _rows(self, tenant_id: str, table: str) -> dict[str, dict[str, Any]]:
        return self._tables.setdefault((tenant_id, table), {})

    def _check_unique(
        self, tenant_id: str, table: str, record: dict[str, Any], exclude_id: str | None = None
    ) -> None:
        for field in self._unique.get(table, ()):
            value = record.get(field)
            if _blank(value):
                continue
            for row_id, row in self._rows(tenant_id, table).items():
                if row_id != exclude_id and row.get(field) == value:
                    raise DuplicateRecordError(table, field, str(value))

    def insert(self, tenant_id: str, table: str, record: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(tenant_id, table, record)
        stored = copy.deepcopy(record)
        self._rows(tenant_id, table)[stored["id"]] = stored
        return copy.deepcopy(stored)

    def update(
        self, tenant_id: str, table: str, record_id: str, patch: dict[str, Any]
    ) -> dict[str, Any]:
        rows = self._rows(tenant_id, table)
        if record_id not in rows:
            raise RecordNotFoundError(table, record_id)
        merged = {**rows[record_id], **copy.deepcopy(patch)}
        self._check_unique(tenant_id, table, merged, exclude_id=record_id)
        rows[record_id] = merged
        return copy.deepcopy(merged)

    def get(self, tenant_id: str, table: str, record_id: str) -> dict[str, Any] | None:
        row = self._rows(tenant_id, table).get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def select(
        self, tenant_id: str, table: str, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        filters = filters or {}
        return [
            copy.deepcopy(row)
            for row in self._rows(tenant_id, table).values()
            if all(row.get(k) == v for k, v in filters.items())
        ]

    def delete(self, tenant_id: str, table: str, record_id: str) -> None:
        self._rows(tenant_id, table).pop(record_id, None)


class MemoryAuditStore:
    """List-backed IAuditStore for unit tests."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    def append(self, record: AuditRecord) -> None:
        self.records.append(record)

    def list_for_entity(self, entity_id: str) -> list[AuditRecord]:
        return [r for r in self.records if r.entity_id == entity_id]


class MemoryDirectory:
    """Dict-backed IDirectory for unit tests."""

    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}
        self._memberships: dict[tuple[str, str], TenantMembership] = {}

    def put_profile(self, profile: Profile) -> None:
        self._profiles[profile.id] = profile

    def put_membership(self, membership: TenantMembership) -> None:
        self._memberships[(membership.user_id, membership.tenant_id)] = membership

    def get_membership(self, user_id: str, tenant_id: str) -> TenantMembership | None:
        return self._memberships.get((user_id, tenant_id))

    def get_profile(self, user_id: str) -> Profile | None:
        return self._profiles.get(user_id)


class MemoryCacheBackend:
    """Dict-backed ICacheBackend for unit tests."""

    def __init__(self) -> None:
        self._store: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
