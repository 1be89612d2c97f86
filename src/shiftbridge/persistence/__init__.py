"""Pluggable persistence backends behind Protocol interfaces."""

from __future__ import annotations

from shiftbridge.core.config import AppSettings
from shiftbridge.persistence.dynamodb_backend import DynamoDBMappingRepository, DynamoDBShiftSink
from shiftbridge.persistence.redis_backend import RedisCacheBackend
from shiftbridge.persistence.s3_backend import S3FileStore


def create_persistence(settings: AppSettings | None = None):
    """Create wired-up persistence backends from application settings.

    Returns:
        Tuple of (mapping_repository, shift_sink, file_store); file_store is
        None unless upload archiving is enabled.
    """
    if settings is None:
        settings = AppSettings()

    cache = None
    if settings.redis.enabled:
        cache = RedisCacheBackend(
            host=settings.redis.host,
            port=settings.redis.port,
            db=settings.redis.db,
        )

    mapping_repository = DynamoDBMappingRepository(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
        cache=cache,
        cache_ttl=settings.redis.ttl_seconds,
    )

    shift_sink = DynamoDBShiftSink(
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )

    file_store = None
    if settings.s3.archive_uploads:
        file_store = S3FileStore(
            bucket=settings.s3.bucket,
            region=settings.s3.region,
            endpoint_url=settings.s3.endpoint_url,
        )

    return mapping_repository, shift_sink, file_store
