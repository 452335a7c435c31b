"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration for records, audit log and tenant directory."""

    model_config = {"env_prefix": "ASSETLEDGER_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis cache configuration (import previews)."""

    model_config = {"env_prefix": "ASSETLEDGER_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    decode_responses: bool = True


class ImportConfig(BaseSettings):
    """Tabular import limits and preview lifetime."""

    model_config = {"env_prefix": "ASSETLEDGER_IMPORT_"}

    preview_row_limit: int = 10
    preview_ttl_seconds: int = 3600
    max_upload_bytes: int = 5 * 1024 * 1024


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "ASSETLEDGER_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "console"
    storage_backend: Literal["memory", "aws"] = "memory"

    dynamodb: DynamoDBConfig = DynamoDBConfig()
    redis: RedisConfig = RedisConfig()
    imports: ImportConfig = ImportConfig()
