"""Convert 7shifts API shift payloads into ShiftRecords."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from shiftbridge.core.exceptions import InvalidPayload
from shiftbridge.ingest.applier import parse_break_minutes
from shiftbridge.ingest.normalize import is_canonical_time, normalize_date, normalize_time
from shiftbridge.models.shift_record import ApplyResult, ShiftRecord

logger = logging.getLogger(__name__)

_LEADING_CLOCK = re.compile(r"^(\d{1,2}:\d{2})(?::\d{2})?")


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _api_time(value: Any) -> str:
    """HH:MM from ``09:00``, ``09:00:00`` or ``2024-03-04T09:00:00-05:00``."""
    text = _text(value)
    if "T" in text:
        text = text.split("T", 1)[1]
    match = _LEADING_CLOCK.match(text)
    return normalize_time(match.group(1) if match else text)


def _api_date(shift: dict[str, Any], today: date | None) -> str:
    raw = _text(shift.get("date"))
    if not raw:
        start = _text(shift.get("start_time"))
        raw = start.split("T", 1)[0] if "T" in start else ""
    return normalize_date(raw, today=today)


def _nested_name(value: Any) -> str:
    if isinstance(value, dict):
        return _text(value.get("name"))
    return ""


def parse_sevenshifts_payload(payload: Any, *, today: date | None = None) -> ApplyResult:
    """Normalize every shift in a ``{"shifts": [...]}`` payload.

    Shifts without a user name or a readable start/end time are skipped and
    counted.
    """
    shifts = payload.get("shifts") if isinstance(payload, dict) else None
    if not isinstance(shifts, list):
        raise InvalidPayload("Invalid 7shifts API data format: expected a 'shifts' list")

    result = ApplyResult()
    for index, shift in enumerate(shifts):
        if not isinstance(shift, dict):
            logger.warning("Skipping 7shifts entry %d: not an object", index)
            result.skipped_count += 1
            continue

        employee_name = _nested_name(shift.get("user"))
        start_time = _api_time(shift.get("start_time"))
        end_time = _api_time(shift.get("end_time"))
        if not employee_name or not (is_canonical_time(start_time) and is_canonical_time(end_time)):
            logger.warning("Skipping 7shifts entry %d: missing user name or shift times", index)
            result.skipped_count += 1
            continue

        result.records.append(
            ShiftRecord.build(
                employee_name=employee_name,
                employee_id=_text(shift.get("user_id")),
                role=_nested_name(shift.get("role")),
                date=_api_date(shift, today),
                start_time=start_time,
                end_time=end_time,
                break_duration_minutes=parse_break_minutes(_text(shift.get("break_time"))),
                notes=_text(shift.get("notes")),
            )
        )

    return result
