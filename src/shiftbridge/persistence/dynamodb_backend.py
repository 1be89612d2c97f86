"""DynamoDB backends: mapping repository (with optional Redis cache) and shift sink."""

from __future__ import annotations

import json
import uuid
from collections.abc import Sequence
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import boto3
from botocore.exceptions import ClientError

from shiftbridge.core.exceptions import StorageError
from shiftbridge.models.shift_record import ShiftRecord

MAPPINGS_TABLE = "shiftbridge-csv-mappings"
SHIFTS_TABLE = "shiftbridge-schedule-shifts"
ORG_CONTEXT_INDEX = "OrgContextIndex"

_KEY_ATTRS = ("PK", "SK", "GSI1PK")


def _to_dynamodb(obj: Any) -> Any:
    """Convert floats to Decimal, recursively, for DynamoDB writes."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamodb(i) for i in obj]
    return obj


def _org_context_key(organization_id: str, context: str) -> str:
    return f"ORG#{organization_id}#CTX#{context}"


def _mapping_key(mapping_id: str) -> dict[str, str]:
    return {"PK": f"MAPPING#{mapping_id}", "SK": "MAPPING"}


def _strip_keys(item: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in item.items() if k not in _KEY_ATTRS}


def _resource(region: str, endpoint_url: str | None):
    kwargs: dict = {"region_name": region}
    if endpoint_url:
        kwargs["endpoint_url"] = endpoint_url
    return boto3.resource("dynamodb", **kwargs)


class DynamoDBMappingRepository:
    """Production IMappingRepository backed by DynamoDB + optional Redis cache.

    Items are keyed by mapping id; the ``OrgContextIndex`` GSI lists every
    mapping of one organization and import context.
    """

    CACHE_TTL = 300  # 5 minutes

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None, cache: Any = None,
                 cache_ttl: int | None = None) -> None:
        self._cache = cache
        self._cache_ttl = cache_ttl or self.CACHE_TTL
        self._table = _resource(region, endpoint_url).Table(f"{MAPPINGS_TABLE}{table_suffix}")

    @staticmethod
    def _cache_key(organization_id: str, context: str) -> str:
        return f"mappings:{organization_id}:{context}"

    def _invalidate(self, record: dict[str, Any] | None) -> None:
        if self._cache is not None and record:
            self._cache.delete(self._cache_key(record["organization_id"], record["format"]))

    # ---- IMappingRepository methods ----

    def list_records(self, organization_id: str, context: str) -> list[dict[str, Any]]:
        cache_key = self._cache_key(organization_id, context)
        if self._cache is not None:
            cached = self._cache.get(cache_key)
            if cached is not None:
                return json.loads(cached)

        items: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {
            "IndexName": ORG_CONTEXT_INDEX,
            "KeyConditionExpression": "GSI1PK = :pk",
            "ExpressionAttributeValues": {":pk": _org_context_key(organization_id, context)},
        }
        try:
            while True:
                resp = self._table.query(**kwargs)
                items.extend(_strip_keys(item) for item in resp.get("Items", []))
                if "LastEvaluatedKey" not in resp:
                    break
                kwargs["ExclusiveStartKey"] = resp["LastEvaluatedKey"]
        except ClientError as exc:
            raise StorageError(
                f"Listing mappings failed for organization_id={organization_id!r}, context={context!r}: {exc}"
            ) from exc

        items.sort(key=lambda r: (r.get("created_at", ""), r.get("id", "")))
        if self._cache is not None:
            self._cache.setex(cache_key, self._cache_ttl, json.dumps(items))
        return items

    def get_record(self, mapping_id: str) -> dict[str, Any] | None:
        try:
            resp = self._table.get_item(Key=_mapping_key(mapping_id))
        except ClientError as exc:
            raise StorageError(f"Reading mapping {mapping_id!r} failed: {exc}") from exc
        item = resp.get("Item")
        return _strip_keys(item) if item else None

    def _put(self, record: dict[str, Any], **kwargs: Any) -> None:
        item = {
            **_mapping_key(record["id"]),
            "GSI1PK": _org_context_key(record["organization_id"], record["format"]),
            **_to_dynamodb(record),
        }
        try:
            self._table.put_item(Item=item, **kwargs)
        except ClientError as exc:
            raise StorageError(f"Writing mapping {record['id']!r} failed: {exc}") from exc
        self._invalidate(record)

    def insert_record(self, record: dict[str, Any]) -> None:
        self._put(record, ConditionExpression="attribute_not_exists(PK)")

    def update_record(self, mapping_id: str, record: dict[str, Any]) -> None:
        # Only a cached listing needs the previous scope, so skip the read otherwise
        previous = self.get_record(mapping_id) if self._cache is not None else None
        self._put({**record, "id": mapping_id})
        # The mapping may have moved to another context listing
        if previous and (previous["organization_id"], previous["format"]) != (
            record["organization_id"], record["format"]
        ):
            self._invalidate(previous)

    def delete_record(self, mapping_id: str) -> None:
        previous = self.get_record(mapping_id)
        try:
            self._table.delete_item(Key=_mapping_key(mapping_id))
        except ClientError as exc:
            raise StorageError(f"Deleting mapping {mapping_id!r} failed: {exc}") from exc
        self._invalidate(previous)


class DynamoDBShiftSink:
    """IShiftSink writing imported shifts to DynamoDB, one item per shift."""

    def __init__(self, table_suffix: str = "", region: str = "us-east-1",
                 endpoint_url: str | None = None) -> None:
        self._table = _resource(region, endpoint_url).Table(f"{SHIFTS_TABLE}{table_suffix}")

    def write(self, organization_id: str, shifts: Sequence[ShiftRecord]) -> None:
        imported_at = datetime.now(UTC).isoformat()
        try:
            with self._table.batch_writer() as batch:
                for shift in shifts:
                    batch.put_item(Item={
                        "PK": f"ORG#{organization_id}#DATE#{shift.shift_date}",
                        "SK": f"SHIFT#{uuid.uuid4()}",
                        "organization_id": organization_id,
                        "imported_at": imported_at,
                        **_to_dynamodb(shift.model_dump()),
                    })
        except ClientError as exc:
            raise StorageError(
                f"Writing {len(shifts)} shifts for organization_id={organization_id!r} failed: {exc}"
            ) from exc
