"""Column mapping models: how a CSV export's headers bind to shift fields."""

from __future__ import annotations

import uuid
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class MappingFormat(StrEnum):
    STANDARD = "standard"  # one row per shift
    WEEKLY = "weekly"  # one row per employee, one column per weekday
    CUSTOM = "custom"  # neither recognised; mapped by hand


WEEKDAYS: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

# Attribute names of the weekday bindings, Monday (index 0) first.
WEEKDAY_FIELDS: tuple[str, ...] = tuple(f"{day.lower()}_field" for day in WEEKDAYS)

STANDARD_REQUIRED_FIELDS: tuple[str, ...] = (
    "employee_name_field", "date_field", "start_time_field", "end_time_field",
)


def _new_id() -> str:
    return str(uuid.uuid4())


class ColumnMapping(BaseModel):
    """A named binding of canonical shift fields to source CSV headers.

    Unbound fields are empty strings. Serialized (API bodies, the stored
    ``column_mapping`` blob) with camelCase keys such as ``employeeNameField``.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    id: str = Field(default_factory=_new_id)
    name: str = ""
    format: MappingFormat = MappingFormat.STANDARD

    # --- Scalar bindings ---
    employee_name_field: str = ""
    role_field: str = ""
    date_field: str = ""
    start_time_field: str = ""
    end_time_field: str = ""
    break_duration_field: str = ""
    notes_field: str = ""

    # --- Weekly bindings ---
    monday_field: str = ""
    tuesday_field: str = ""
    wednesday_field: str = ""
    thursday_field: str = ""
    friday_field: str = ""
    saturday_field: str = ""
    sunday_field: str = ""

    # --- Parsing hints kept with the mapping ---
    time_format: str = ""
    role_pattern: str = ""

    def weekday_bindings(self) -> list[tuple[int, str]]:
        """Bound weekday columns as (day index, header), Monday first."""
        bindings: list[tuple[int, str]] = []
        for index, attr in enumerate(WEEKDAY_FIELDS):
            header = getattr(self, attr)
            if header:
                bindings.append((index, header))
        return bindings

    @property
    def has_weekly_fields(self) -> bool:
        return any(getattr(self, attr) for attr in WEEKDAY_FIELDS)

    def missing_bindings(self, as_format: MappingFormat | None = None) -> list[str]:
        """Required bindings that are unset for ``as_format`` (default: own format).

        ``custom`` has no requirements of its own.
        """
        fmt = as_format or self.format
        if fmt == MappingFormat.STANDARD:
            return [attr for attr in STANDARD_REQUIRED_FIELDS if not getattr(self, attr)]
        if fmt == MappingFormat.WEEKLY:
            missing = [] if self.employee_name_field else ["employee_name_field"]
            if not self.has_weekly_fields:
                missing.append("weekday_field")
            return missing
        return []

    @property
    def is_complete(self) -> bool:
        return not self.missing_bindings()

    def save_problems(self) -> list[str]:
        """Reasons this mapping may not be saved; empty when savable."""
        problems = [f"missing {attr}" for attr in self.missing_bindings()]
        if not self.name.strip():
            problems.insert(0, "missing name")
        return problems

    def to_blob(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class DetectionResult(BaseModel):
    """Outcome of header-based format detection: the proposed draft mapping."""

    format: MappingFormat
    mapping: ColumnMapping
    headers: list[str] = Field(default_factory=list)
