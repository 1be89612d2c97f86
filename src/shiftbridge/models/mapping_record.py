"""Persistence shape of a saved column mapping (the csv_mappings record).

Every ColumnMapping binding is mirrored as a flat snake_case column so the
records stay queryable, and the whole mapping is also kept as one
``column_mapping`` blob so loading returns exactly what was saved.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from shiftbridge.models.column_mapping import ColumnMapping, MappingFormat

# Bindings mirrored 1:1 between ColumnMapping attributes and record columns.
MIRRORED_FIELDS: tuple[str, ...] = (
    "employee_name_field", "role_field", "date_field", "start_time_field",
    "end_time_field", "break_duration_field", "notes_field",
    "monday_field", "tuesday_field", "wednesday_field", "thursday_field",
    "friday_field", "saturday_field", "sunday_field",
    "time_format", "role_pattern",
)


class MappingRecord(BaseModel):
    """A csv_mappings row."""

    id: str
    name: str
    organization_id: str
    format: str  # import context tag, e.g. "schedule"
    format_type: str = MappingFormat.STANDARD.value
    column_mapping: dict[str, Any] = Field(default_factory=dict)

    employee_name_field: str = ""
    role_field: str = ""
    date_field: str = ""
    start_time_field: str = ""
    end_time_field: str = ""
    break_duration_field: str = ""
    notes_field: str = ""
    monday_field: str = ""
    tuesday_field: str = ""
    wednesday_field: str = ""
    thursday_field: str = ""
    friday_field: str = ""
    saturday_field: str = ""
    sunday_field: str = ""
    time_format: str = ""
    role_pattern: str = ""

    created_at: str = ""
    updated_at: str = ""

    @field_validator(*MIRRORED_FIELDS, mode="before")
    @classmethod
    def _null_is_unbound(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def from_mapping(
        cls,
        mapping: ColumnMapping,
        *,
        organization_id: str,
        context: str,
        created_at: str,
        updated_at: str,
    ) -> MappingRecord:
        return cls(
            id=mapping.id,
            name=mapping.name,
            organization_id=organization_id,
            format=context,
            format_type=mapping.format.value,
            column_mapping=mapping.to_blob(),
            created_at=created_at,
            updated_at=updated_at,
            **{attr: getattr(mapping, attr) for attr in MIRRORED_FIELDS},
        )

    def to_mapping(self) -> ColumnMapping:
        """Rebuild the ColumnMapping, preferring the stored blob."""
        if self.column_mapping:
            data = dict(self.column_mapping)
            data["id"] = self.id
            return ColumnMapping.model_validate(data)

        # Rows written without a blob only carry the flat columns
        try:
            fmt = MappingFormat(self.format_type)
        except ValueError:
            fmt = MappingFormat.STANDARD
        return ColumnMapping(
            id=self.id,
            name=self.name,
            format=fmt,
            **{attr: getattr(self, attr) for attr in MIRRORED_FIELDS},
        )

    def to_item(self) -> dict[str, Any]:
        return self.model_dump()
