"""Care unit normalization and scope matching."""

import re
from typing import Any, Mapping

from .fields import format_number, get_string_field, is_number

FACILITY = "facility"

UNIT_KEYS = ["unit", "unitId", "locationUnit", "floor", "wing"]

_WHITESPACE_RE = re.compile(r"\s+")


def _compare_key(value: str) -> str:
    return value.strip().lower()


def normalize_unit(raw: Any, unit_aliases: Mapping[str, str] | None = None) -> str | None:
    """Normalize a free-text unit label and apply the alias table.

    Internal whitespace is collapsed; alias keys are matched exactly,
    then case-insensitively. Returns None for empty input.
    """
    if raw is None:
        return None
    value = format_number(raw) if is_number(raw) else str(raw)
    value = value.strip()
    if not value:
        return None

    normalized = _WHITESPACE_RE.sub(" ", value)
    aliases = unit_aliases or {}
    alias_key = _compare_key(normalized)

    direct = aliases.get(normalized)
    if direct is None:
        direct = aliases.get(alias_key)
    if isinstance(direct, str) and direct.strip():
        return direct.strip()

    for key, target in aliases.items():
        if not isinstance(key, str) or not isinstance(target, str):
            continue
        if _compare_key(key) == alias_key and target.strip():
            return target.strip()

    return normalized


def get_unit_from_record(record: Any, unit_aliases: Mapping[str, str] | None = None) -> str | None:
    raw = get_string_field(record, UNIT_KEYS)
    return normalize_unit(raw or None, unit_aliases)


def matches_unit(record: Any, unit_scope: Any, unit_aliases: Mapping[str, str] | None = None) -> bool:
    """Check whether a record belongs to the requested unit scope.

    The facility scope matches every record.
    """
    if unit_scope == FACILITY:
        return True
    target = normalize_unit(unit_scope, unit_aliases)
    if not target:
        return False
    return get_unit_from_record(record, unit_aliases) == target
