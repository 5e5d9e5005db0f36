"""Date normalization to canonical YYYY-MM-DD strings."""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterator

from dateutil import parser as dtparser

from .fields import is_number

ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})(?:[T\s].*)?$")
US_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

# Two fixed fill-in dates; a string that parses differently under each is
# missing its year, month or day.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def _local_date(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date().isoformat()


def _calendar_date(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def to_iso_date(value: Any) -> str | None:
    """Convert a date-like value to 'YYYY-MM-DD', or None.

    Accepts date/datetime objects (local calendar date), epoch
    milliseconds, ISO strings (anything after the date part is ignored),
    M/D/YYYY strings and, as a last resort, whatever dateutil can parse.
    Calendar-invalid strings such as 2026-02-30 return None, as do partial
    strings ("March", "10:30", "Monday") that lack a full calendar date.
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        try:
            return _local_date(value)
        except (ValueError, OverflowError, OSError):
            return None

    if isinstance(value, date):
        return value.isoformat()

    if is_number(value):
        try:
            return _local_date(datetime.fromtimestamp(value / 1000))
        except (ValueError, OverflowError, OSError):
            return None

    if not isinstance(value, str):
        return None

    raw = value.strip()
    if not raw:
        return None

    match = ISO_DATE_RE.match(raw)
    if match:
        y, m, d = (int(part) for part in match.groups())
        return _calendar_date(y, m, d)

    match = US_DATE_RE.match(raw)
    if match:
        m, d, y = (int(part) for part in match.groups())
        return _calendar_date(y, m, d)

    try:
        first, second = (dtparser.parse(raw, default=default) for default in _PARSE_DEFAULTS)
        if first != second:
            return None
        return _local_date(first)
    except (ValueError, OverflowError, OSError):
        return None


def sanitize_iso_date(value: Any) -> str:
    """Normalize a target date, keeping unparseable strings as given.

    Non-string garbage becomes "" so it can never equal a record's
    missing (None) date.
    """
    iso = to_iso_date(value)
    if iso:
        return iso
    return value if isinstance(value, str) else ""


def parse_iso_date(iso: str) -> date | None:
    try:
        return date.fromisoformat(iso)
    except (TypeError, ValueError):
        return None


def add_hours_to_iso_date(start_iso: str, hours: int | float) -> str | None:
    """Add whole hours to UTC midnight of a date and return the date part."""
    start = parse_iso_date(start_iso)
    if start is None:
        return None
    midnight = datetime(start.year, start.month, start.day, tzinfo=timezone.utc)
    try:
        return (midnight + timedelta(hours=hours)).date().isoformat()
    except OverflowError:
        return None


def next_iso_date(iso: str) -> str | None:
    return add_hours_to_iso_date(iso, 24)


def iter_iso_dates(start_iso: str, end_iso: str) -> Iterator[str]:
    """Yield every calendar day in [start, end], ascending."""
    start = parse_iso_date(start_iso)
    end = parse_iso_date(end_iso)
    if start is None or end is None:
        return
    cursor = start
    while cursor <= end:
        yield cursor.isoformat()
        cursor += timedelta(days=1)


def inclusive_day_count(start_iso: str, end_iso: str) -> int:
    start = parse_iso_date(start_iso)
    end = parse_iso_date(end_iso)
    if start is None or end is None:
        return 0
    return max(0, (end - start).days + 1)
