"""Create the shiftbridge DynamoDB tables and seed sample column mappings.

Usage:
    python scripts/seed_dynamodb.py --endpoint-url http://localhost:4566
"""

from __future__ import annotations

import argparse
from datetime import UTC, datetime
from typing import Any

import boto3

from shiftbridge.models.column_mapping import ColumnMapping, MappingFormat
from shiftbridge.models.mapping_record import MappingRecord
from shiftbridge.persistence.dynamodb_backend import (
    MAPPINGS_TABLE,
    ORG_CONTEXT_INDEX,
    SHIFTS_TABLE,
    DynamoDBMappingRepository,
)

DEMO_ORGANIZATION = "demo-restaurant"

_KEYS = [
    {"AttributeName": "PK", "KeyType": "HASH"},
    {"AttributeName": "SK", "KeyType": "RANGE"},
]

TABLE_DEFINITIONS: list[dict[str, Any]] = [
    {
        "name": MAPPINGS_TABLE,
        "attributes": ["PK", "SK", "GSI1PK"],
        "indexes": [
            {
                "IndexName": ORG_CONTEXT_INDEX,
                "KeySchema": [{"AttributeName": "GSI1PK", "KeyType": "HASH"}],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    },
    {"name": SHIFTS_TABLE, "attributes": ["PK", "SK"], "indexes": []},
]

SAMPLE_MAPPINGS: list[ColumnMapping] = [
    ColumnMapping(
        id="sample-standard",
        name="One row per shift",
        format=MappingFormat.STANDARD,
        employee_name_field="Employee",
        role_field="Position",
        date_field="Date",
        start_time_field="Start Time",
        end_time_field="End Time",
        break_duration_field="Break",
        notes_field="Notes",
    ),
    ColumnMapping(
        id="sample-weekly",
        name="Weekly grid",
        format=MappingFormat.WEEKLY,
        employee_name_field="Name",
        role_field="Role",
        monday_field="Monday",
        tuesday_field="Tuesday",
        wednesday_field="Wednesday",
        thursday_field="Thursday",
        friday_field="Friday",
        saturday_field="Saturday",
        sunday_field="Sunday",
    ),
]


def create_tables(ddb: Any, suffix: str = "") -> None:
    """Create the mapping and shift tables. Skips tables that already exist."""
    client = ddb.meta.client
    existing = client.list_tables().get("TableNames", [])

    for defn in TABLE_DEFINITIONS:
        table_name = f"{defn['name']}{suffix}"
        if table_name in existing:
            print(f"  Table {table_name} already exists, skipping")
            continue
        kwargs: dict[str, Any] = {
            "TableName": table_name,
            "KeySchema": _KEYS,
            "AttributeDefinitions": [
                {"AttributeName": name, "AttributeType": "S"} for name in defn["attributes"]
            ],
            "BillingMode": "PAY_PER_REQUEST",
        }
        if defn["indexes"]:
            kwargs["GlobalSecondaryIndexes"] = defn["indexes"]
        client.create_table(**kwargs)
        print(f"  Created table {table_name}")


def seed_sample_mappings(
    suffix: str = "",
    region: str = "us-east-1",
    endpoint_url: str | None = None,
    organization_id: str = DEMO_ORGANIZATION,
    context: str = "schedule",
) -> int:
    """Insert the sample mappings for ``organization_id``; existing ids are overwritten."""
    repository = DynamoDBMappingRepository(table_suffix=suffix, region=region, endpoint_url=endpoint_url)
    now = datetime.now(UTC).isoformat()
    for mapping in SAMPLE_MAPPINGS:
        record = MappingRecord.from_mapping(
            mapping,
            organization_id=organization_id,
            context=context,
            created_at=now,
            updated_at=now,
        )
        repository.update_record(mapping.id, record.to_item())
    print(f"  Seeded {len(SAMPLE_MAPPINGS)} mappings for {organization_id}")
    return len(SAMPLE_MAPPINGS)


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed DynamoDB tables for shiftbridge")
    parser.add_argument("--endpoint-url", default=None, help="DynamoDB endpoint (e.g. http://localhost:4566)")
    parser.add_argument("--table-suffix", default="", help="Table name suffix (e.g. -dev)")
    parser.add_argument("--region", default="us-east-1", help="AWS region")
    parser.add_argument("--organization", default=DEMO_ORGANIZATION, help="Organization to seed mappings for")
    args = parser.parse_args()

    kwargs: dict[str, Any] = {"region_name": args.region}
    if args.endpoint_url:
        kwargs["endpoint_url"] = args.endpoint_url

    ddb = boto3.resource("dynamodb", **kwargs)

    print("Creating tables...")
    create_tables(ddb, suffix=args.table_suffix)

    print("Seeding mappings...")
    seed_sample_mappings(
        suffix=args.table_suffix,
        region=args.region,
        endpoint_url=args.endpoint_url,
        organization_id=args.organization,
    )

    print("Done!")


if __name__ == "__main__":
    main()
