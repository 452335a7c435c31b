"""Create AssetLedger DynamoDB tables and seed a demo tenant.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from typing import Any

import boto3

TABLE_DEFINITIONS: list[dict[str, Any]] = [
    {"name": "assetledger-records"},
    {"name": "assetledger-audit-log"},
    {"name": "assetledger-directory"},
]

DEMO_TENANT_ID = "demo-tenant"
DEMO_USERS: list[dict[str, Any]] = [
    {
        "id": "demo-owner", "email": "owner@example.com", "full_name": "Demo Owner",
        "role": "user", "is_owner": True,
    },
    {
        "id": "demo-manager", "email": "manager@example.com", "full_name": "Demo Manager",
        "role": "manager", "is_owner": False,
    },
    {
        "id": "demo-user", "email": "user@example.com", "full_name": None,
        "role": "user", "is_owner": False,
    },
]


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create the records, audit-log and directory tables. Skips existing ones."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    for defn in TABLE_DEFINITIONS:
        table_name = f"{defn['name']}{suffix}"
        if table_name in existing:
            print(f"  Table {table_name} already exists, skipping")
            continue
        client.create_table(
            TableName=table_name,
            KeySchema=[
                {"AttributeName": "PK", "KeyType": "HASH"},
                {"AttributeName": "SK", "KeyType": "RANGE"},
            ],
            AttributeDefinitions=[
                {"AttributeName": "PK", "AttributeType": "S"},
                {"AttributeName": "SK", "AttributeType": "S"},
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        print(f"  Created table {table_name}")


def seed_directory(ddb: Any, suffix: str = "", tenant_id: str = DEMO_TENANT_ID) -> None:
    """Seed demo profiles and their memberships in ``tenant_id``."""
    tbl = ddb.Table(f"assetledger-directory{suffix}")
    with tbl.batch_writer() as batch:
        for user in DEMO_USERS:
            batch.put_item(Item={
                "PK": f"USER#{user['id']}", "SK": "PROFILE",
                "id": user["id"], "email": user["email"], "full_name": user["full_name"],
            })
            batch.put_item(Item={
                "PK": f"USER#{user['id']}", "SK": f"TENANT#{tenant_id}",
                "user_id": user["id"], "tenant_id": tenant_id,
                "role": user["role"], "is_owner": user["is_owner"], "is_primary": True,
            })
    print(f"  Seeded {len(DEMO_USERS)} users in tenant {tenant_id}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB tables for AssetLedger")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--tenant-id", default=DEMO_TENANT_ID, help="Tenant to seed demo users into")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    print("Seeding directory...")
    seed_directory(ddb, suffix=args.table_suffix, tenant_id=args.tenant_id)

    print("Done!")


if __name__ == "__main__":
    main()
