"""Header-based format detection and initial column binding.

Detection is a fixed, ordered list of (format, rule) pairs: the first rule
that accepts the headers decides the format and supplies the auto-bound
fields. When no rule accepts, the format is ``custom`` with nothing bound.
Alias lists are likewise ordered; the first alias present as a header wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable

from shiftbridge.models.column_mapping import (
    WEEKDAY_FIELDS,
    WEEKDAYS,
    ColumnMapping,
    DetectionResult,
    MappingFormat,
)

logger = logging.getLogger(__name__)

EMPLOYEE_NAME_ALIASES: tuple[str, ...] = ("Name", "Employee", "Employee Name")
ROLE_ALIASES: tuple[str, ...] = ("Role", "Position", "Job")
DATE_ALIASES: tuple[str, ...] = ("Date", "date", "Shift Date")
START_TIME_ALIASES: tuple[str, ...] = ("Start Time", "start_time", "Start")
END_TIME_ALIASES: tuple[str, ...] = ("End Time", "end_time", "End")

# Columns read for the employee id on every row, whatever the mapping.
EMPLOYEE_ID_ALIASES: tuple[str, ...] = ("employee_id", "Employee ID", "EmployeeID", "User ID", "user_id")

# Minimum number of date/start/end columns for a standard export.
STANDARD_MIN_MATCHES = 2


def first_present(headers: Collection[str], aliases: Iterable[str]) -> str:
    for alias in aliases:
        if alias in headers:
            return alias
    return ""


def _weekly_bindings(headers: Collection[str]) -> dict[str, str] | None:
    present = {attr: day for day, attr in zip(WEEKDAYS, WEEKDAY_FIELDS) if day in headers}
    if not present:
        return None
    bindings = dict(present)
    bindings["employee_name_field"] = first_present(headers, EMPLOYEE_NAME_ALIASES)
    return bindings


def _standard_bindings(headers: Collection[str]) -> dict[str, str] | None:
    time_columns = {
        "date_field": first_present(headers, DATE_ALIASES),
        "start_time_field": first_present(headers, START_TIME_ALIASES),
        "end_time_field": first_present(headers, END_TIME_ALIASES),
    }
    if sum(1 for header in time_columns.values() if header) < STANDARD_MIN_MATCHES:
        return None
    bindings = {attr: header for attr, header in time_columns.items() if header}
    bindings["employee_name_field"] = first_present(headers, EMPLOYEE_NAME_ALIASES)
    bindings["role_field"] = first_present(headers, ROLE_ALIASES)
    return bindings


# Priority order matters: a weekly grid may also carry a "Date" column.
DETECTION_RULES: list[tuple[MappingFormat, Callable[[Collection[str]], dict[str, str] | None]]] = [
    (MappingFormat.WEEKLY, _weekly_bindings),
    (MappingFormat.STANDARD, _standard_bindings),
]


def detect_format(headers: Iterable[str], *, name: str = "") -> DetectionResult:
    """Classify a header row and propose a draft mapping for it."""
    header_list = [str(h) for h in headers]
    header_set = frozenset(header_list)

    for fmt, rule in DETECTION_RULES:
        bindings = rule(header_set)
        if bindings is None:
            continue
        mapping = ColumnMapping(
            name=name,
            format=fmt,
            **{attr: header for attr, header in bindings.items() if header},
        )
        logger.info("Detected %s format from %d headers", fmt.value, len(header_list))
        return DetectionResult(format=fmt, mapping=mapping, headers=header_list)

    logger.info("No known format in headers %s; mapping must be done by hand", header_list)
    return DetectionResult(
        format=MappingFormat.CUSTOM,
        mapping=ColumnMapping(name=name, format=MappingFormat.CUSTOM),
        headers=header_list,
    )
