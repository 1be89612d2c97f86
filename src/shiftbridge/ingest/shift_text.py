"""Parse weekly-grid cells such as ``"10am - 6pm (COLD PREP)"``."""

from __future__ import annotations

import re

from pydantic import BaseModel

from shiftbridge.ingest.normalize import is_canonical_time, normalize_time

_ROLE = re.compile(r"\(([^)]+)\)")

# Time-range patterns in priority order; the first one that matches wins.
# Each captures (start, end), which then go through normalize_time.
SHIFT_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    # 10am - 6pm, 4pm - 10:30pm
    ("12-hour", re.compile(r"([0-9]+(?::[0-9]+)?\s*(?:am|pm))\s*-\s*([0-9]+(?::[0-9]+)?\s*(?:am|pm))", re.IGNORECASE)),
    # 10:00 - 18:00
    ("24-hour", re.compile(r"([0-9]{1,2}:[0-9]{2})\s*-\s*([0-9]{1,2}:[0-9]{2})")),
    # 10 - 18
    ("bare-hour", re.compile(r"([0-9]{1,2})\s*-\s*([0-9]{1,2})")),
]


class ExtractedShift(BaseModel):
    """Times and role read from one grid cell; empty times mean no shift."""

    start_time: str = ""
    end_time: str = ""
    role: str = ""

    @property
    def has_times(self) -> bool:
        return bool(self.start_time and self.end_time)


def is_day_off(text: str) -> bool:
    stripped = text.strip()
    return not stripped or stripped.lower() == "off"


def extract_shift(text: str | None) -> ExtractedShift:
    """Read start/end time and an optional parenthesised role from a cell.

    Empty cells and ``off`` (any case) give an empty result, as does text
    none of ``SHIFT_PATTERNS`` can read.
    """
    raw = text or ""
    if is_day_off(raw):
        return ExtractedShift()

    role_match = _ROLE.search(raw)
    role = role_match.group(1).strip() if role_match else ""
    time_text = _ROLE.sub("", raw).strip()

    for _name, pattern in SHIFT_PATTERNS:
        match = pattern.search(time_text)
        if not match:
            continue
        start, end = normalize_time(match.group(1)), normalize_time(match.group(2))
        if is_canonical_time(start) and is_canonical_time(end):
            return ExtractedShift(start_time=start, end_time=end, role=role)
        break

    return ExtractedShift(role=role)
