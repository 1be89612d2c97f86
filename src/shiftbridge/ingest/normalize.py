"""Date and time canonicalization for imported shifts.

Neither function raises. ``normalize_date`` falls back to today's date when
nothing parses; that fallback is lossy on purpose (a bad date degrades one
field, it does not fail the import) and callers that care should check the
raw value themselves. ``normalize_time`` hands back the trimmed input when it
cannot parse it, and callers treat that as "no usable time".
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_ISO_DATE = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_MONTH_NAME_DATE = re.compile(r"[A-Za-z]+\s+\d{1,2},?\s+\d{4}")

_CLOCK_24H = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
_CLOCK_12H = re.compile(r"([0-9]+)(?::([0-9]+))?\s*(am|pm)", re.IGNORECASE)
_BARE_HOUR = re.compile(r"^\d{1,2}$")

CANONICAL_TIME = re.compile(r"^(?:[01][0-9]|2[0-3]):[0-5][0-9]$")


def _from_slash(value: str) -> date | None:
    match = _SLASH_DATE.match(value)
    if not match:
        return None
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _from_iso(value: str) -> date | None:
    match = _ISO_DATE.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _generic(value: str) -> date | None:
    try:
        return date_parser.parse(value).date()
    except (ValueError, OverflowError):
        return None


def _from_month_name(value: str) -> date | None:
    if not _MONTH_NAME_DATE.search(value):
        return None
    return _generic(value)


# Tried in order; the first parser returning a date wins.
DATE_PARSERS: list[tuple[str, Callable[[str], date | None]]] = [
    ("mm/dd/yyyy", _from_slash),
    ("yyyy-mm-dd", _from_iso),
    ("month dd, yyyy", _from_month_name),
    ("generic", _generic),
]


def parse_date(text: str) -> date | None:
    """First successful parse of ``text`` across ``DATE_PARSERS``, else None."""
    for _name, parse in DATE_PARSERS:
        parsed = parse(text)
        if parsed is not None:
            return parsed
    return None


def normalize_date(value: str | None, *, today: date | None = None) -> str:
    """Canonical ``YYYY-MM-DD`` for ``value``, or today's date if unparsable."""
    text = (value or "").strip()
    if text:
        parsed = parse_date(text)
        if parsed is not None:
            return parsed.isoformat()
        logger.warning("Unparsable date %r, using current date", text)
    fallback = today or date.today()
    return fallback.isoformat()


def normalize_time(value: str | None) -> str:
    """Canonical zero-padded 24-hour ``HH:MM`` for ``value``.

    Accepts ``H:MM``/``HH:MM`` 24-hour times, ``h[:mm] am|pm`` and bare
    hours; anything else comes back trimmed but unchanged.
    """
    original = (value or "").strip()
    text = original.lower()

    match = _CLOCK_24H.match(text)
    if match:
        return f"{int(match.group(1)):02d}:{match.group(2)}"

    match = _CLOCK_12H.search(text)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2)) if match.group(2) else 0
        is_pm = match.group(3) == "pm"
        if hours > 12 or minutes > 59:
            return original
        if is_pm and hours < 12:
            hours += 12
        if not is_pm and hours == 12:
            hours = 0
        return f"{hours:02d}:{minutes:02d}"

    if _BARE_HOUR.match(text):
        hours = int(text)
        if hours <= 23:
            return f"{hours:02d}:00"

    return original


def is_canonical_time(value: str) -> bool:
    return bool(CANONICAL_TIME.match(value))


def monday_of(day: date) -> date:
    """Monday of the week containing ``day``."""
    return date.fromordinal(day.toordinal() - day.weekday())


def parse_week_start(value: date | datetime | str | None, *, today: date | None = None) -> date:
    """Week start for weekly grids: the given date, else this week's Monday."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    if text:
        parsed = parse_date(text)
        if parsed is not None:
            return parsed
        logger.warning("Unparsable week start %r, using this week's Monday", text)
    return monday_of(today or date.today())
