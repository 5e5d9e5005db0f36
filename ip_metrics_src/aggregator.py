"""Range derivation and period aggregation of daily snapshots."""

import logging
from typing import Any, Iterable, Mapping

from .config import DeriveOptions
from .dates import iter_iso_dates, sanitize_iso_date, to_iso_date
from .deriver import derive_daily_metrics, round1
from .fields import is_number
from .models import (
    SUMMED_COUNTERS,
    DailySnapshot,
    MetricTotals,
    PeriodAggregate,
    RatesPer1000ResidentDays,
)
from .units import FACILITY

logger = logging.getLogger(__name__)


def derive_metrics_range(
    document: Any,
    start_iso: Any,
    end_iso: Any,
    unit_id: Any = FACILITY,
    options: DeriveOptions | Mapping[str, Any] | None = None,
) -> list[DailySnapshot]:
    """Derive one snapshot per calendar day in [start, end].

    Returns an empty list when start is after end or either bound
    cannot be parsed as a date.
    """
    start = to_iso_date(start_iso)
    end = to_iso_date(end_iso)
    if start is None or end is None:
        logger.warning(f"Cannot derive metrics range {start_iso!r}..{end_iso!r}: unparseable bounds")
        return []
    if start > end:
        return []

    snapshots = [
        derive_daily_metrics(document, day, unit_id, options)
        for day in iter_iso_dates(start, end)
    ]
    logger.info(f"Derived {len(snapshots)} daily snapshots for {unit_id} ({start}..{end})")
    return snapshots


def _as_snapshot(row: Any) -> DailySnapshot:
    if isinstance(row, DailySnapshot):
        return row
    return DailySnapshot.from_dict(row)


def _counter(row: DailySnapshot, name: str) -> int | float:
    value = getattr(row, name, 0)
    return value if is_number(value) else 0


def aggregate_metrics(
    daily: Iterable[DailySnapshot | Mapping[str, Any]],
    unit_id: Any,
    start_iso: str,
    end_iso: str,
) -> PeriodAggregate:
    """Reduce daily snapshots to one period aggregate.

    Counters are summed. The indication percentage is weighted by each
    day's active course count, falling back to a plain mean across days
    when no day had active courses. Resident-days is None (not 0) when no
    snapshot reported census, and rates per 1000 resident-days are only
    computed when resident-days is positive.

    Args:
        daily: DailySnapshot objects or their wire dicts
        unit_id: Unit scope recorded on the aggregate
        start_iso: First day to include
        end_iso: Last day to include

    Returns:
        PeriodAggregate
    """
    start = sanitize_iso_date(start_iso)
    end = sanitize_iso_date(end_iso)
    rows = [_as_snapshot(row) for row in (daily or [])]
    filtered = [row for row in rows if row.date and start <= row.date <= end]

    sums = {name: 0 for name in SUMMED_COUNTERS}
    resident_days_sum = 0
    has_resident_days = False
    weighted_pct_numerator = 0.0
    weighted_pct_denominator = 0
    simple_pct_sum = 0.0

    for row in filtered:
        for name in SUMMED_COUNTERS:
            sums[name] += _counter(row, name)

        if is_number(row.resident_days):
            resident_days_sum += row.resident_days
            has_resident_days = True

        pct = _counter(row, "abx_with_indication_pct")
        active_courses = _counter(row, "active_abt_courses")
        if active_courses > 0:
            weighted_pct_numerator += pct * active_courses
            weighted_pct_denominator += active_courses

        simple_pct_sum += pct

    if weighted_pct_denominator > 0:
        indication_pct = round1(weighted_pct_numerator / weighted_pct_denominator)
    elif filtered:
        indication_pct = round1(simple_pct_sum / len(filtered))
    else:
        indication_pct = 0.0

    totals = MetricTotals(abx_with_indication_pct=indication_pct, **sums)
    resident_days = resident_days_sum if has_resident_days else None

    rates = None
    if resident_days and resident_days > 0:
        rates = RatesPer1000ResidentDays(
            new_infections=round1(totals.new_infections / resident_days * 1000),
            new_abt_starts=round1(totals.new_abt_starts / resident_days * 1000),
        )

    return PeriodAggregate(
        unit_id=unit_id,
        start_iso=start_iso,
        end_iso=end_iso,
        resident_days=resident_days,
        totals=totals,
        rates=rates,
    )
