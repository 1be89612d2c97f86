"""CSV ingest pipeline: read, detect, normalize, apply."""

from __future__ import annotations

from shiftbridge.ingest.applier import apply_mapping, apply_standard, apply_weekly
from shiftbridge.ingest.csv_reader import ParsedCsv, read_csv
from shiftbridge.ingest.detector import detect_format
from shiftbridge.ingest.fields import resolve
from shiftbridge.ingest.normalize import normalize_date, normalize_time
from shiftbridge.ingest.sevenshifts import parse_sevenshifts_payload
from shiftbridge.ingest.shift_text import ExtractedShift, extract_shift

__all__ = [
    "ExtractedShift",
    "ParsedCsv",
    "apply_mapping",
    "apply_standard",
    "apply_weekly",
    "detect_format",
    "extract_shift",
    "normalize_date",
    "normalize_time",
    "parse_sevenshifts_payload",
    "read_csv",
    "resolve",
]
