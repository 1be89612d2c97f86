"""Unit tests for DynamoDBMappingRepository and DynamoDBShiftSink using moto."""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from shiftbridge.core.exceptions import StorageError
from shiftbridge.models.column_mapping import ColumnMapping, MappingFormat
from shiftbridge.models.mapping_record import MappingRecord
from shiftbridge.models.shift_record import ShiftRecord
from shiftbridge.persistence.dynamodb_backend import (
    MAPPINGS_TABLE,
    ORG_CONTEXT_INDEX,
    SHIFTS_TABLE,
    DynamoDBMappingRepository,
    DynamoDBShiftSink,
)
from shiftbridge.services.mapping_store import MappingDefinitionStore
from tests.fakes import MemoryCacheBackend

TABLE_SUFFIX = "-test"
REGION = "us-east-1"

# ---------- helpers ----------

def _create_table(client, name: str, gsi: bool = False):
    """Create a DynamoDB table with PK/SK key schema and optionally the org/context index."""
    kwargs = {
        "TableName": name,
        "KeySchema": [
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }
    if gsi:
        kwargs["AttributeDefinitions"].append({"AttributeName": "GSI1PK", "AttributeType": "S"})
        kwargs["GlobalSecondaryIndexes"] = [{
            "IndexName": ORG_CONTEXT_INDEX,
            "KeySchema": [{"AttributeName": "GSI1PK", "KeyType": "HASH"}],
            "Projection": {"ProjectionType": "ALL"},
        }]
    client.create_table(**kwargs)


def _record(mapping_id: str = "m-1", org: str = "org-1", context: str = "schedule",
            created_at: str = "2024-01-01T00:00:00+00:00", **overrides) -> dict:
    mapping = ColumnMapping(
        id=mapping_id,
        name=overrides.pop("name", "Weekly grid"),
        format=MappingFormat.WEEKLY,
        employee_name_field="Name",
        monday_field="Monday",
    )
    return MappingRecord.from_mapping(
        mapping, organization_id=org, context=context, created_at=created_at, updated_at=created_at,
    ).to_item()


# ---------- fixtures ----------

@pytest.fixture
def aws():
    with mock_aws():
        ddb = boto3.resource("dynamodb", region_name=REGION)
        client = boto3.client("dynamodb", region_name=REGION)
        _create_table(client, f"{MAPPINGS_TABLE}{TABLE_SUFFIX}", gsi=True)
        _create_table(client, f"{SHIFTS_TABLE}{TABLE_SUFFIX}")
        yield ddb


@pytest.fixture
def repo(aws):
    return DynamoDBMappingRepository(table_suffix=TABLE_SUFFIX, region=REGION)


@pytest.fixture
def cached_repo(aws):
    cache = MemoryCacheBackend()
    return DynamoDBMappingRepository(table_suffix=TABLE_SUFFIX, region=REGION, cache=cache), cache


# ---------- list_records ----------

class TestListRecords:
    def test_returns_records_for_org_and_context(self, repo):
        repo.insert_record(_record("m-1"))
        repo.insert_record(_record("m-2", org="org-2"))
        repo.insert_record(_record("m-3", context="payroll"))

        records = repo.list_records("org-1", "schedule")
        assert [r["id"] for r in records] == ["m-1"]
        assert "PK" not in records[0]
        assert "GSI1PK" not in records[0]

    def test_sorted_by_creation(self, repo):
        repo.insert_record(_record("late", created_at="2024-02-01T00:00:00+00:00"))
        repo.insert_record(_record("early", created_at="2024-01-01T00:00:00+00:00"))
        assert [r["id"] for r in repo.list_records("org-1", "schedule")] == ["early", "late"]

    def test_empty_for_unknown_org(self, repo):
        assert repo.list_records("nobody", "schedule") == []

    def test_caches_listing(self, cached_repo):
        repo, cache = cached_repo
        repo.insert_record(_record("m-1"))
        repo.list_records("org-1", "schedule")
        cached_val = cache.get("mappings:org-1:schedule")
        assert cached_val is not None
        assert "m-1" in cached_val

    def test_write_invalidates_cache(self, cached_repo):
        repo, cache = cached_repo
        repo.list_records("org-1", "schedule")
        repo.insert_record(_record("m-1"))
        assert cache.get("mappings:org-1:schedule") is None
        assert [r["id"] for r in repo.list_records("org-1", "schedule")] == ["m-1"]


# ---------- get / insert / update / delete ----------

class TestWrites:
    def test_get_record_round_trips(self, repo):
        record = _record("m-1")
        repo.insert_record(record)
        assert repo.get_record("m-1") == record

    def test_get_missing_returns_none(self, repo):
        assert repo.get_record("missing") is None

    def test_insert_existing_id_fails(self, repo):
        repo.insert_record(_record("m-1"))
        with pytest.raises(StorageError):
            repo.insert_record(_record("m-1"))

    def test_update_replaces_record(self, repo):
        repo.insert_record(_record("m-1"))
        repo.update_record("m-1", _record("m-1", name="Renamed"))
        assert repo.get_record("m-1")["name"] == "Renamed"

    def test_update_without_cache_skips_read(self, repo):
        repo.insert_record(_record("m-1"))
        repo._table = MagicMock(wraps=repo._table)
        repo.update_record("m-1", _record("m-1", name="Renamed"))
        assert repo._table.get_item.call_count == 0
        assert repo._table.put_item.call_count == 1

    def test_update_moving_context_invalidates_old_listing(self, cached_repo):
        repo, cache = cached_repo
        repo.insert_record(_record("m-1"))
        repo.list_records("org-1", "schedule")
        repo.update_record("m-1", _record("m-1", context="payroll"))
        assert cache.get("mappings:org-1:schedule") is None
        assert repo.list_records("org-1", "schedule") == []

    def test_delete(self, repo):
        repo.insert_record(_record("m-1"))
        repo.delete_record("m-1")
        assert repo.get_record("m-1") is None

    def test_delete_missing_is_noop(self, repo):
        repo.delete_record("never-existed")

    def test_missing_table_raises_storage_error(self, aws):
        repo = DynamoDBMappingRepository(table_suffix="-absent", region=REGION)
        with pytest.raises(StorageError):
            repo.get_record("m-1")


class TestWithMappingStore:
    def test_save_fetch_delete(self, repo):
        store = MappingDefinitionStore(repo)
        mapping = ColumnMapping(
            name="Standard", employee_name_field="Employee", date_field="Date",
            start_time_field="Start", end_time_field="End",
        )
        assert store.save_mapping("org-1", "schedule", mapping)
        assert store.fetch_mappings("org-1", "schedule", refresh=True) == [mapping]
        store.delete_mapping(mapping.id)
        assert store.fetch_mappings("org-1", "schedule") == []


# ---------- shift sink ----------

class TestShiftSink:
    def test_writes_one_item_per_shift(self, aws):
        sink = DynamoDBShiftSink(table_suffix=TABLE_SUFFIX, region=REGION)
        shifts = [
            ShiftRecord.build(employee_name="Alice Chen", date="2024-01-01", start_time="09:00",
                              end_time="17:00", break_duration_minutes=30.5),
            ShiftRecord.build(employee_name="Bo Diaz", date="2024-01-02", start_time="10:00", end_time="18:00"),
        ]
        sink.write("org-1", shifts)

        items = aws.Table(f"{SHIFTS_TABLE}{TABLE_SUFFIX}").scan()["Items"]
        assert len(items) == 2
        by_name = {item["employee_name"]: item for item in items}
        alice = by_name["Alice Chen"]
        assert alice["PK"] == "ORG#org-1#DATE#2024-01-01"
        assert alice["SK"].startswith("SHIFT#")
        assert alice["organization_id"] == "org-1"
        assert alice["break_duration_minutes"] == Decimal("30.5")

    def test_missing_table_raises_storage_error(self, aws):
        sink = DynamoDBShiftSink(table_suffix="-absent", region=REGION)
        shift = ShiftRecord.build(employee_name="Al", date="2024-01-01", start_time="09:00", end_time="17:00")
        with pytest.raises(StorageError):
            sink.write("org-1", [shift])
