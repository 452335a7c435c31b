"""Tests for DynamoDB seed script."""

from __future__ import annotations

import sys
from pathlib import Path

import boto3
import pytest
from moto import mock_aws

from assetledger.access.guard import AuthorizationGuard
from assetledger.models.membership import Actor, Role
from assetledger.persistence.dynamodb_backend import DynamoDBDirectory

# Make scripts/ importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent / "scripts"))

from seed_dynamodb import DEMO_TENANT_ID, create_tables, seed_directory  # noqa: E402


@pytest.fixture
def ddb():
    with mock_aws():
        yield boto3.resource("dynamodb", region_name="us-east-1")


class TestCreateTables:
    def test_creates_all_three_tables(self, ddb):
        create_tables(ddb, suffix="-test")
        client = boto3.client("dynamodb", region_name="us-east-1")
        tables = client.list_tables()["TableNames"]
        assert sorted(tables) == [
            "assetledger-audit-log-test",
            "assetledger-directory-test",
            "assetledger-records-test",
        ]

    def test_idempotent_skips_existing(self, ddb):
        create_tables(ddb, suffix="-test")
        create_tables(ddb, suffix="-test")  # should not raise
        client = boto3.client("dynamodb", region_name="us-east-1")
        assert len(client.list_tables()["TableNames"]) == 3


class TestSeedDirectory:
    def test_seeds_profiles_and_memberships(self, ddb):
        create_tables(ddb, suffix="-test")
        seed_directory(ddb, suffix="-test")
        resp = ddb.Table("assetledger-directory-test").scan()
        assert resp["Count"] == 6

    def test_seeded_owner_is_admin_equivalent(self, ddb):
        create_tables(ddb, suffix="-test")
        seed_directory(ddb, suffix="-test")
        directory = DynamoDBDirectory(table_suffix="-test", region="us-east-1")
        guard = AuthorizationGuard(directory)
        eff = guard.effective_role(Actor(id="demo-owner"), DEMO_TENANT_ID)
        assert eff.role is Role.ADMIN
        assert eff.stored_role is Role.USER
        assert directory.get_profile("demo-user").full_name is None
