"""Domain models: column mappings, their stored records, and shift records."""

from __future__ import annotations

from shiftbridge.models.column_mapping import (
    WEEKDAY_FIELDS,
    WEEKDAYS,
    ColumnMapping,
    DetectionResult,
    MappingFormat,
)
from shiftbridge.models.mapping_record import MappingRecord
from shiftbridge.models.shift_record import ApplyResult, ShiftRecord, group_shifts_by_date, split_name

__all__ = [
    "WEEKDAYS",
    "WEEKDAY_FIELDS",
    "ApplyResult",
    "ColumnMapping",
    "DetectionResult",
    "MappingFormat",
    "MappingRecord",
    "ShiftRecord",
    "group_shifts_by_date",
    "split_name",
]
