"""Tests for manual record create/edit with auditing."""

from __future__ import annotations

import pytest

from assetledger.core.exceptions import (
    DuplicateRecordError,
    PermissionDenied,
    RecordNotFoundError,
    UnknownFieldError,
)
from assetledger.models.schema import ASSET_SCHEMA, EMPLOYEE_SCHEMA
from assetledger.models.validation import DiagnosticKind
from assetledger.records.service import RecordService

TENANT = "tenant-1"


@pytest.fixture
def records(store, guard, recorder) -> RecordService:
    return RecordService(store, guard, recorder)


@pytest.fixture
def laptop(records, user):
    record, _ = records.create_record(
        ASSET_SCHEMA, user, TENANT, {"tag": "A-1", "name": "Laptop", "status": "ready"}
    )
    return record


class TestCreateRecord:
    def test_defaults_filled(self, laptop, user):
        assert laptop["category"] == "General"
        assert laptop["qty"] == 1
        assert laptop["user_id"] == user.id

    def test_generates_tag_when_missing(self, records, user):
        record, diagnostics = records.create_record(ASSET_SCHEMA, user, TENANT, {"name": "Dock"})
        assert record["tag"].startswith("ASSET-")
        assert diagnostics == []

    def test_audits_creation(self, records, laptop, audit_store):
        fields = {r.field_name for r in audit_store.list_for_entity(laptop["id"])}
        assert {"Tag", "Name", "Status"} <= fields

    def test_employee_requires_manager(self, records, user, manager):
        with pytest.raises(PermissionDenied):
            records.create_record(EMPLOYEE_SCHEMA, user, TENANT, {"name": "Ada"})
        record, _ = records.create_record(EMPLOYEE_SCHEMA, manager, TENANT, {"name": "Ada"})
        assert record["name"] == "Ada"

    def test_duplicate_tag(self, records, laptop, owner):
        with pytest.raises(DuplicateRecordError):
            records.create_record(ASSET_SCHEMA, owner, TENANT, {"tag": "A-1", "name": "Other"})


class TestUpdateRecord:
    def test_owner_of_record_may_edit(self, records, laptop, user, audit_store):
        updated, diagnostics = records.update_record(
            ASSET_SCHEMA, user, TENANT, laptop["id"], {"status": "Broken", "notes": "cracked"}
        )
        assert updated["status"] == "broken"
        assert diagnostics[0].kind is DiagnosticKind.CASE_NORMALIZED

        history = [r for r in audit_store.list_for_entity(laptop["id"]) if r.old_value is not None]
        assert [(r.field_name, r.old_value, r.new_value) for r in history] == [
            ("Status", "ready", "broken"),
        ]
        notes = [r for r in audit_store.list_for_entity(laptop["id"]) if r.field_name == "Notes"]
        assert notes[0].old_value is None

    def test_unchanged_patch_writes_no_audit(self, records, laptop, user, audit_store):
        before = len(audit_store.records)
        records.update_record(ASSET_SCHEMA, user, TENANT, laptop["id"], {"status": "ready"})
        assert len(audit_store.records) == before

    def test_other_member_denied(self, records, laptop, manager):
        with pytest.raises(PermissionDenied):
            records.update_record(ASSET_SCHEMA, manager, TENANT, laptop["id"], {"status": "broken"})

    def test_tenant_owner_may_edit_anything(self, records, laptop, owner):
        updated, _ = records.update_record(
            ASSET_SCHEMA, owner, TENANT, laptop["id"], {"assigned_to": "Ada"}
        )
        assert updated["assigned_to"] == "Ada"

    def test_missing_record(self, records, owner):
        with pytest.raises(RecordNotFoundError):
            records.update_record(ASSET_SCHEMA, owner, TENANT, "nope", {"status": "broken"})

    def test_other_tenant_cannot_see_record(self, records, laptop, user):
        with pytest.raises(RecordNotFoundError):
            records.update_record(ASSET_SCHEMA, user, "other-tenant", laptop["id"], {"qty": 2})

    def test_unknown_field(self, records, laptop, user):
        with pytest.raises(UnknownFieldError):
            records.update_record(ASSET_SCHEMA, user, TENANT, laptop["id"], {"colour": "red"})

    def test_bookkeeping_fields_ignored(self, records, laptop, user):
        updated, _ = records.update_record(
            ASSET_SCHEMA, user, TENANT, laptop["id"], {"user_id": "someone-else", "qty": 3}
        )
        assert updated["user_id"] == user.id
        assert updated["qty"] == 3

    def test_history(self, records, laptop, owner):
        records.update_record(ASSET_SCHEMA, owner, TENANT, laptop["id"], {"status": "broken"})
        assert records.history(laptop["id"])[-1].new_value == "broken"
