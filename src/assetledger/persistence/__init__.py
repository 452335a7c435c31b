"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from dataclasses import dataclass

from assetledger.core.config import AppSettings
from assetledger.core.protocols import IAuditStore, ICacheBackend, IDirectory, IRecordStore
from assetledger.persistence.dynamodb_backend import (
    DynamoDBAuditStore,
    DynamoDBDirectory,
    DynamoDBRecordStore,
)
from assetledger.persistence.memory_backend import (
    MemoryAuditStore,
    MemoryCacheBackend,
    MemoryDirectory,
    MemoryRecordStore,
)
from assetledger.persistence.redis_backend import RedisCacheBackend


@dataclass
class Persistence:
    records: IRecordStore
    audit: IAuditStore
    directory: IDirectory
    cache: ICacheBackend


def create_persistence(settings: AppSettings | None = None) -> Persistence:
    """Create wired-up persistence backends from application settings.

    ``storage_backend="memory"`` gives process-local dict stores (local dev,
    tests); ``"aws"`` gives DynamoDB tables plus a Redis preview cache.
    """
    if settings is None:
        settings = AppSettings()

    if settings.storage_backend == "memory":
        return Persistence(
            records=MemoryRecordStore(),
            audit=MemoryAuditStore(),
            directory=MemoryDirectory(),
            cache=MemoryCacheBackend(),
        )

    ddb = settings.dynamodb
    cache = RedisCacheBackend(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        decode_responses=settings.redis.decode_responses,
    )
    return Persistence(
        records=DynamoDBRecordStore(
            table_suffix=ddb.table_suffix, region=ddb.region, endpoint_url=ddb.endpoint_url,
        ),
        audit=DynamoDBAuditStore(
            table_suffix=ddb.table_suffix, region=ddb.region, endpoint_url=ddb.endpoint_url,
        ),
        directory=DynamoDBDirectory(
            table_suffix=ddb.table_suffix, region=ddb.region, endpoint_url=ddb.endpoint_url,
        ),
        cache=cache,
    )
