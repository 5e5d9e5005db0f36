"""Census and resident-day resolution."""

from typing import Any, Mapping

from .fields import get_array, parse_number, safe_object
from .units import FACILITY, matches_unit

CENSUS_COUNT_KEYS = ["censusCount", "count", "residents", "census"]


def census_row_amount(row: Any) -> int | float | None:
    """First numeric value among the census keys (not a sum)."""
    obj = safe_object(row)
    for key in CENSUS_COUNT_KEYS:
        amount = parse_number(obj.get(key))
        if amount is not None:
            return amount
    return None


def census_count_for(
    document: Any,
    unit_scope: Any,
    unit_aliases: Mapping[str, str] | None = None,
) -> int | float | None:
    """Resolve the census head count for a unit scope.

    Returns None when the document carries no census rows at all, which
    is different from a census of zero. When no matching row has a
    numeric amount, each matching row counts as one resident.
    """
    census = get_array(safe_object(document).get("census"))
    if not census:
        return None

    rows = [
        row for row in census
        if unit_scope == FACILITY or matches_unit(row, unit_scope, unit_aliases)
    ]
    amounts = [amount for amount in (census_row_amount(row) for row in rows) if amount is not None]

    if not amounts:
        return len(rows) if rows else None

    return sum(amounts)
