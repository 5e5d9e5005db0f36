"""Field resolution over loosely-structured raw records.

The same clinical concept shows up under different keys depending on
where a record came from (CSV import, hand entry, older schema versions).
Each concept is described by an ordered list of candidate keys and
resolved here, first match wins.
"""

import math
from typing import Any, Mapping, Sequence


def safe_object(value: Any) -> Mapping[str, Any]:
    """Return the value if it is a mapping, otherwise an empty dict."""
    if isinstance(value, Mapping):
        return value
    return {}


def get_array(value: Any) -> list:
    """Return the value if it is a list/tuple, otherwise an empty list."""
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def is_number(value: Any) -> bool:
    """True for finite ints/floats. Booleans are not numbers here."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def parse_number(value: Any) -> int | float | None:
    """Parse a finite number from a number or numeric string."""
    if is_number(value):
        return value
    if isinstance(value, str) and value.strip():
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() else parsed
    return None


def format_number(value: int | float) -> str:
    """Render a number the way it was most likely typed (5.0 -> '5')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _lookup(record: Mapping[str, Any], key: str) -> Any:
    if key in record:
        return record[key]
    wanted = key.strip().lower()
    for candidate, value in record.items():
        if isinstance(candidate, str) and candidate.strip().lower() == wanted:
            return value
    return None


def get_string_field(record: Any, keys: Sequence[str]) -> str:
    """Return the first non-empty value among the candidate keys.

    Keys are matched exactly first, then ignoring case and surrounding
    whitespace. Strings are returned trimmed, finite numbers as strings.

    Args:
        record: Raw record (anything; non-mappings resolve to "")
        keys: Candidate keys in priority order

    Returns:
        The resolved value, or "" if no candidate has a usable value
    """
    obj = safe_object(record)
    for key in keys:
        value = _lookup(obj, key)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if is_number(value):
            return format_number(value)
    return ""
