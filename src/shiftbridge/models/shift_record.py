"""Canonical Shift Record: the normalized unit every import produces.

Whatever the source layout (one row per shift, a weekly grid, a 7shifts API
payload), each usable shift becomes one of these and is handed to the
shift sink.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


def split_name(full_name: str) -> tuple[str, str]:
    """Split a display name into (first, last).

    The last whitespace-delimited token is the surname and the remainder is
    the first name; a single token is a first name with no surname.
    """
    parts = full_name.split()
    if len(parts) > 1:
        return " ".join(parts[:-1]), parts[-1]
    return (parts[0] if parts else ""), ""


class ShiftRecord(BaseModel):
    """Single normalized shift."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    # --- Employee ---
    employee_name: str
    first_name: str = ""
    last_name: str = ""
    employee_id: str = ""
    punch_id: str = ""  # same value as employee_id, used for team-member matching
    role: str = ""

    # --- When ---
    date: str  # YYYY-MM-DD
    shift_date: str  # same value as date, kept for older consumers
    start_time: str  # HH:MM, 24-hour
    end_time: str  # HH:MM, 24-hour
    break_duration_minutes: float = 0

    notes: str = ""

    @classmethod
    def build(
        cls,
        *,
        employee_name: str,
        date: str,
        start_time: str,
        end_time: str,
        employee_id: str = "",
        role: str = "",
        break_duration_minutes: float = 0,
        notes: str = "",
    ) -> ShiftRecord:
        """Create a record, deriving the name parts and the duplicated date/id fields."""
        first_name, last_name = split_name(employee_name)
        return cls(
            employee_name=employee_name,
            first_name=first_name,
            last_name=last_name,
            employee_id=employee_id,
            punch_id=employee_id,
            role=role,
            date=date,
            shift_date=date,
            start_time=start_time,
            end_time=end_time,
            break_duration_minutes=break_duration_minutes,
            notes=notes,
        )


class ApplyResult(BaseModel):
    """Records produced from a row set plus how many rows/cells were rejected."""

    records: list[ShiftRecord] = Field(default_factory=list)
    skipped_count: int = 0

    @property
    def record_count(self) -> int:
        return len(self.records)


def group_shifts_by_date(shifts: Iterable[ShiftRecord]) -> dict[str, list[ShiftRecord]]:
    """Group shifts by shift date, keeping first-seen date order."""
    grouped: dict[str, list[ShiftRecord]] = {}
    for shift in shifts:
        grouped.setdefault(shift.shift_date, []).append(shift)
    return grouped
