"""DynamoDB backends for records, audit log and tenant directory.

Table layout (all tables use a ``PK``/``SK`` string key schema):

    assetledger-records    PK=TENANT#{tenant_id}  SK={table}#{record_id}
    assetledger-audit-log  PK=ENTITY#{entity_id}  SK={timestamp}#{audit_id}
    assetledger-directory  PK=USER#{user_id}      SK=PROFILE | TENANT#{tenant_id}
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from assetledger.core.exceptions import (
    AuditWriteError,
    DuplicateRecordError,
    PersistenceError,
    RecordNotFoundError,
)
from assetledger.core.logging import get_logger
from assetledger.models.audit import AuditRecord
from assetledger.models.membership import Profile, TenantMembership
from assetledger.models.schema import SCHEMAS, unique_fields_by_table

logger = get_logger(__name__)

RECORDS_TABLE = "assetledger-records"
AUDIT_TABLE = "assetledger-audit-log"
DIRECTORY_TABLE = "assetledger-directory"

_KEY_ATTRS = ("PK", "SK")
_MODELS_BY_TABLE = {s.table: s.record_model for s in SCHEMAS.values()}


def _decode_decimals(item: dict[str, Any]) -> dict[str, Any]:
    """Convert Decimal values in a DynamoDB item to int/float."""
    out: dict[str, Any] = {}
    for k, v in item.items():
        if isinstance(v, Decimal):
            out[k] = int(v) if v == int(v) else float(v)
        elif isinstance(v, dict):
            out[k] = _decode_decimals(v)
        else:
            out[k] = v
    return out


def _encode_value(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return Decimal(str(value))
    return value


def _strip_keys(item: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in item.items() if k not in _KEY_ATTRS}


def _resource(region: str, endpoint_url: str | None):
    kwargs: dict = {"region_name": region}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.resource("dynamodb", **kwargs)


class _DynamoDBTable:
    """Shared table access and paginated queries."""

    TABLE_BASE = ""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table_suffix = table_suffix
        self._region = region
        self._endpoint_url = endpoint_url
        self._ddb = _resource(region, endpoint_url)

    @property
    def table_name(self) -> str:
        return f"{self.TABLE_BASE}{self._table_suffix}"

    def _table(self):
        return self._ddb.Table(self.table_name)

    def _query(self, pk: str, sk_prefix: str | None = None) -> list[dict[str, Any]]:
        """Query every item under ``pk``, following pagination."""
        condition = Key("PK").eq(pk)
        if sk_prefix:
            condition = condition & Key("SK").begins_with(sk_prefix)
        tbl = self._table()
        kwargs: dict[str, Any] = {"KeyConditionExpression": condition}
        items: list[dict[str, Any]] = []
        while True:
            resp = tbl.query(**kwargs)
            items.extend(resp.get("Items", []))
            last = resp.get("LastEvaluatedKey")
            if not last:
                return items
            kwargs["ExclusiveStartKey"] = last

    def _get_item(self, pk: str, sk: str) -> dict[str, Any] | None:
        """Get a single item by PK + SK. Returns None if not found."""
        resp = self._table().get_item(Key={"PK": pk, "SK": sk})
        return resp.get("Item")


# ---------------------------------------------------------------------------
# Record Store
# ---------------------------------------------------------------------------

class DynamoDBRecordStore(_DynamoDBTable):
    """Production IRecordStore: one partition per tenant.

    Uniqueness is checked with a partition query before each write; two
    concurrent writers of the same tag can still both succeed.
    """

    TABLE_BASE = RECORDS_TABLE

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None,
                 unique_fields: dict[str, tuple[str, ...]] | None = None) -> None:
        super().__init__(table_suffix, region, endpoint_url)
        self._unique = unique_fields_by_table() if unique_fields is None else unique_fields

    @staticmethod
    def _pk(tenant_id: str) -> str:
        return f"TENANT#{tenant_id}"

    @staticmethod
    def _sk(table: str, record_id: str) -> str:
        return f"{table}#{record_id}"

    def _to_record(self, table: str, item: dict[str, Any]) -> dict[str, Any]:
        data = _strip_keys(item)
        model = _MODELS_BY_TABLE.get(table)
        if model is None:
            return _decode_decimals(data)
        return model.model_validate(data).model_dump()

    def _to_item(self, tenant_id: str, table: str, record: dict[str, Any]) -> dict[str, Any]:
        item = {k: _encode_value(v) for k, v in record.items()}
        item["PK"] = self._pk(tenant_id)
        item["SK"] = self._sk(table, record["id"])
        return item

    def _check_unique(
        self, tenant_id: str, table: str, record: dict[str, Any], exclude_id: str | None = None
    ) -> None:
        fields = self._unique.get(table, ())
        if not fields:
            return
        try:
            existing = self._query(self._pk(tenant_id), f"{table}#")
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB uniqueness check on {table} failed: {exc}") from exc
        for field in fields:
            value = _encode_value(record.get(field))
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            for item in existing:
                if item.get("id") != exclude_id and item.get(field) == value:
                    raise DuplicateRecordError(table, field, str(value))

    def _put(self, tenant_id: str, table: str, record: dict[str, Any]) -> None:
        try:
            self._table().put_item(Item=self._to_item(tenant_id, table, record))
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB write to {table} failed: {exc}") from exc

    def insert(self, tenant_id: str, table: str, record: dict[str, Any]) -> dict[str, Any]:
        self._check_unique(tenant_id, table, record)
        self._put(tenant_id, table, record)
        return dict(record)

    def update(
        self, tenant_id: str, table: str, record_id: str, patch: dict[str, Any]
    ) -> dict[str, Any]:
        current = self.get(tenant_id, table, record_id)
        if current is None:
            raise RecordNotFoundError(table, record_id)
        merged = {**current, **patch}
        self._check_unique(tenant_id, table, merged, exclude_id=record_id)
        self._put(tenant_id, table, merged)
        return merged

    def get(self, tenant_id: str, table: str, record_id: str) -> dict[str, Any] | None:
        try:
            item = self._get_item(self._pk(tenant_id), self._sk(table, record_id))
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB read from {table} failed: {exc}") from exc
        return self._to_record(table, item) if item else None

    def select(
        self, tenant_id: str, table: str, filters: dict[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        try:
            items = self._query(self._pk(tenant_id), f"{table}#")
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB query on {table} failed: {exc}") from exc
        records = [self._to_record(table, item) for item in items]
        filters = filters or {}
        return [r for r in records if all(r.get(k) == v for k, v in filters.items())]

    def delete(self, tenant_id: str, table: str, record_id: str) -> None:
        try:
            self._table().delete_item(
                Key={"PK": self._pk(tenant_id), "SK": self._sk(table, record_id)}
            )
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB delete from {table} failed: {exc}") from exc


# ---------------------------------------------------------------------------
# Audit Store
# ---------------------------------------------------------------------------

class DynamoDBAuditStore(_DynamoDBTable):
    """Production IAuditStore; entries sort by timestamp within an entity."""

    TABLE_BASE = AUDIT_TABLE

    def append(self, record: AuditRecord) -> None:
        item = record.model_dump(mode="json")
        item["PK"] = f"ENTITY#{record.entity_id}"
        item["SK"] = f"{record.timestamp.isoformat()}#{record.id}"
        try:
            self._table().put_item(Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise AuditWriteError(f"DynamoDB audit append failed: {exc}") from exc

    def list_for_entity(self, entity_id: str) -> list[AuditRecord]:
        try:
            items = self._query(f"ENTITY#{entity_id}")
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB audit query failed: {exc}") from exc
        return [AuditRecord.model_validate(_strip_keys(item)) for item in items]


# ---------------------------------------------------------------------------
# Tenant Directory
# ---------------------------------------------------------------------------

class DynamoDBDirectory(_DynamoDBTable):
    """Production IDirectory: profile and memberships share a user partition."""

    TABLE_BASE = DIRECTORY_TABLE

    def _read(self, pk: str, sk: str) -> dict[str, Any] | None:
        try:
            return self._get_item(pk, sk)
        except (ClientError, BotoCoreError) as exc:
            raise PersistenceError(f"DynamoDB directory read failed: {exc}") from exc

    def get_membership(self, user_id: str, tenant_id: str) -> TenantMembership | None:
        item = self._read(f"USER#{user_id}", f"TENANT#{tenant_id}")
        return TenantMembership.model_validate(_strip_keys(item)) if item else None

    def get_profile(self, user_id: str) -> Profile | None:
        item = self._read(f"USER#{user_id}", "PROFILE")
        return Profile.model_validate(_strip_keys(item)) if item else None

    def put_profile(self, profile: Profile) -> None:
        item = profile.model_dump()
        item.update(PK=f"USER#{profile.id}", SK="PROFILE")
        self._table().put_item(Item=item)

    def put_membership(self, membership: TenantMembership) -> None:
        item = membership.model_dump(mode="json")
        item.update(PK=f"USER#{membership.user_id}", SK=f"TENANT#{membership.tenant_id}")
        self._table().put_item(Item=item)
        logger.debug(
            "membership_saved",
            user_id=membership.user_id,
            tenant_id=membership.tenant_id,
            role=membership.role.value,
        )
