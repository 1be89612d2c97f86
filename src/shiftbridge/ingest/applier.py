"""Apply a confirmed ColumnMapping to parsed rows, producing ShiftRecords.

Two paths, chosen by ``mapping.format``:

* standard -- one row per shift, with date/start/end columns;
* weekly -- one row per employee, one shift-text cell per weekday.

``custom`` runs the weekly path when any weekday column is bound and the
standard path otherwise, the same fallback the detector uses.

A mapping missing a required binding raises ``MappingIncomplete`` before any
row is read. Rows (or weekly cells) that cannot yield a shift are skipped,
logged, and counted in ``ApplyResult.skipped_count``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta

from shiftbridge.core.exceptions import MappingIncomplete
from shiftbridge.core.types import Row
from shiftbridge.ingest.detector import EMPLOYEE_ID_ALIASES
from shiftbridge.ingest.fields import cell, resolve
from shiftbridge.ingest.normalize import is_canonical_time, normalize_date, normalize_time, parse_week_start
from shiftbridge.ingest.shift_text import extract_shift, is_day_off
from shiftbridge.models.column_mapping import ColumnMapping, MappingFormat
from shiftbridge.models.shift_record import ApplyResult, ShiftRecord

logger = logging.getLogger(__name__)


def _require(mapping: ColumnMapping, fmt: MappingFormat) -> None:
    missing = mapping.missing_bindings(fmt)
    if missing:
        raise MappingIncomplete(fmt.value, missing)


def parse_break_minutes(value: str) -> float:
    """Break length in minutes; 0 when empty or not a finite number."""
    try:
        minutes = float(value.strip())
    except ValueError:
        return 0
    return minutes if math.isfinite(minutes) else 0


def apply_standard(
    rows: Iterable[Row],
    mapping: ColumnMapping,
    *,
    today: date | None = None,
) -> ApplyResult:
    """One ShiftRecord per row that has an employee name and both times."""
    _require(mapping, MappingFormat.STANDARD)

    result = ApplyResult()
    for line, row in enumerate(rows, start=1):
        employee_name = cell(row, mapping.employee_name_field).strip()
        raw_start = cell(row, mapping.start_time_field)
        raw_end = cell(row, mapping.end_time_field)

        if not employee_name or not raw_start.strip() or not raw_end.strip():
            logger.warning("Skipping row %d: missing employee name, start time or end time", line)
            result.skipped_count += 1
            continue

        start_time, end_time = normalize_time(raw_start), normalize_time(raw_end)
        if not (is_canonical_time(start_time) and is_canonical_time(end_time)):
            logger.warning(
                "Skipping row %d for %s: unreadable time range %r - %r",
                line, employee_name, raw_start, raw_end,
            )
            result.skipped_count += 1
            continue

        result.records.append(
            ShiftRecord.build(
                employee_name=employee_name,
                employee_id=resolve(row, EMPLOYEE_ID_ALIASES).strip(),
                role=cell(row, mapping.role_field).strip(),
                date=normalize_date(cell(row, mapping.date_field), today=today),
                start_time=start_time,
                end_time=end_time,
                break_duration_minutes=parse_break_minutes(cell(row, mapping.break_duration_field)),
                notes=cell(row, mapping.notes_field),
            )
        )

    return result


def apply_weekly(
    rows: Iterable[Row],
    mapping: ColumnMapping,
    week_start: date | datetime | str | None = None,
    *,
    today: date | None = None,
) -> ApplyResult:
    """One ShiftRecord per (employee row, weekday cell) holding a readable shift.

    ``week_start`` is the date of the Monday column (default: Monday of the
    current week); a cell's date is ``week_start`` plus its weekday index.
    Empty and ``off`` cells are days off, not rejections.
    """
    _require(mapping, MappingFormat.WEEKLY)

    start = parse_week_start(week_start, today=today)
    days = mapping.weekday_bindings()

    result = ApplyResult()
    for line, row in enumerate(rows, start=1):
        employee_name = cell(row, mapping.employee_name_field).strip()
        if not employee_name:
            logger.warning("Skipping row %d: missing employee name", line)
            result.skipped_count += 1
            continue

        employee_id = resolve(row, EMPLOYEE_ID_ALIASES).strip()
        row_role = cell(row, mapping.role_field).strip()

        for day_index, header in days:
            text = cell(row, header)
            if is_day_off(text):
                continue

            shift = extract_shift(text)
            if not shift.has_times:
                logger.warning("Skipping %s on %s: unreadable shift %r", employee_name, header, text)
                result.skipped_count += 1
                continue

            shift_date = (start + timedelta(days=day_index)).isoformat()
            result.records.append(
                ShiftRecord.build(
                    employee_name=employee_name,
                    employee_id=employee_id,
                    role=shift.role or row_role,
                    date=shift_date,
                    start_time=shift.start_time,
                    end_time=shift.end_time,
                    break_duration_minutes=0,
                )
            )

    return result


def apply_mapping(
    rows: Iterable[Row],
    mapping: ColumnMapping,
    week_start: date | datetime | str | None = None,
    *,
    today: date | None = None,
) -> ApplyResult:
    """Dispatch to the standard or weekly path according to the mapping."""
    if mapping.format == MappingFormat.WEEKLY or (
        mapping.format == MappingFormat.CUSTOM and mapping.has_weekly_fields
    ):
        result = apply_weekly(rows, mapping, week_start, today=today)
    else:
        result = apply_standard(rows, mapping, today=today)

    logger.info(
        "Applied %s mapping %r: %d shifts, %d skipped",
        mapping.format.value, mapping.name, result.record_count, result.skipped_count,
    )
    return result
