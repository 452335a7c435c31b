"""Shared fixtures: one tenant with an owner, a manager, a user and an outsider."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from assetledger.access.guard import AuthorizationGuard
from assetledger.audit.recorder import ChangeAuditRecorder
from assetledger.importing.importer import BatchImporter
from assetledger.models.membership import Actor, Profile, Role, TenantMembership
from tests.fakes import MemoryAuditStore, MemoryDirectory, MemoryRecordStore

TENANT = "tenant-1"
FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def owner() -> Actor:
    return Actor(id="u-owner", email="owner@example.com", full_name="Olive Owner")


@pytest.fixture
def manager() -> Actor:
    return Actor(id="u-manager", email="manager@example.com")


@pytest.fixture
def user() -> Actor:
    return Actor(id="u-user")


@pytest.fixture
def outsider() -> Actor:
    return Actor(id="u-outsider", full_name="Out Sider")


@pytest.fixture
def directory(owner, manager, user) -> MemoryDirectory:
    d = MemoryDirectory()
    d.put_profile(Profile(id=owner.id, email=owner.email, full_name=owner.full_name))
    d.put_membership(TenantMembership(
        user_id=owner.id, tenant_id=TENANT, role=Role.USER, is_owner=True, is_primary=True,
    ))
    d.put_membership(TenantMembership(user_id=manager.id, tenant_id=TENANT, role=Role.MANAGER))
    d.put_membership(TenantMembership(user_id=user.id, tenant_id=TENANT, role=Role.USER))
    return d


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def audit_store() -> MemoryAuditStore:
    return MemoryAuditStore()


@pytest.fixture
def guard(directory) -> AuthorizationGuard:
    return AuthorizationGuard(directory)


@pytest.fixture
def recorder(audit_store) -> ChangeAuditRecorder:
    return ChangeAuditRecorder(audit_store, clock=lambda: FIXED_NOW)


@pytest.fixture
def importer(store, guard, recorder) -> BatchImporter:
    return BatchImporter(store, guard, recorder, clock=lambda: FIXED_NOW)
