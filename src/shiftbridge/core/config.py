"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class DynamoDBConfig(BaseSettings):
    """DynamoDB configuration for mapping definitions and imported shifts."""

    model_config = {"env_prefix": "SHIFTBRIDGE_DYNAMO_"}

    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class RedisConfig(BaseSettings):
    """Redis cache in front of the mapping repository."""

    model_config = {"env_prefix": "SHIFTBRIDGE_REDIS_"}

    enabled: bool = False
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    ttl_seconds: int = 300


class S3Config(BaseSettings):
    """S3 storage for archived schedule uploads."""

    model_config = {"env_prefix": "SHIFTBRIDGE_S3_"}

    bucket: str = "shiftbridge-schedule-uploads"
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override
    archive_uploads: bool = False


class ImportConfig(BaseSettings):
    """CSV import behaviour."""

    model_config = {"env_prefix": "SHIFTBRIDGE_IMPORT_"}

    default_context: str = "schedule"
    encoding: str = "utf-8-sig"  # tolerates a leading BOM from spreadsheet exports


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "SHIFTBRIDGE_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    dynamodb: DynamoDBConfig = DynamoDBConfig()
    redis: RedisConfig = RedisConfig()
    s3: S3Config = S3Config()
    imports: ImportConfig = ImportConfig()
