"""Period summaries for IP daily metrics.

Builds leadership-style summaries over a date range with a comparison
against the preceding period of the same length.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Any, Mapping

from .aggregator import aggregate_metrics, derive_metrics_range
from .config import DeriveOptions, resolve_options
from .dates import inclusive_day_count, parse_iso_date, to_iso_date
from .deriver import resolve_unit_scope, round1
from .fields import get_array, safe_object
from .models import COUNTER_KEYS, SUMMED_COUNTERS, PeriodAggregate
from .normalizers import ABX_END_KEYS, ABX_START_KEYS
from .rates import ABT_END_KEYS, ABT_START_KEYS, calculate_aur, calculate_days_of_therapy
from .units import FACILITY, matches_unit

logger = logging.getLogger(__name__)

# Courses count toward DOT under the same date keys the deriver reads
DOT_START_KEYS = ABX_START_KEYS + [k for k in ABT_START_KEYS if k not in ABX_START_KEYS]
DOT_END_KEYS = ABX_END_KEYS + [k for k in ABT_END_KEYS if k not in ABX_END_KEYS]


def calc_change(current: int | float | None, previous: int | float | None) -> float | None:
    """Percent change, None when there is no usable baseline."""
    if current is None or previous is None or previous == 0:
        return None
    return round1((current - previous) / previous * 100)


class MetricsReporter:
    """Generates period summaries from the unified database document."""

    def __init__(self, options: DeriveOptions | Mapping[str, Any] | None = None):
        self.options = resolve_options(options)

    def generate_period_summary(
        self,
        document: Any,
        start_iso: Any,
        end_iso: Any,
        unit_id: Any = FACILITY,
    ) -> dict[str, Any]:
        """Generate a summary for [start, end] against the prior period.

        Args:
            document: Unified database document
            start_iso: First day of the period
            end_iso: Last day of the period
            unit_id: Unit identifier or "facility"

        Returns:
            Dict with the aggregate, prior aggregate, changes and therapy metrics
        """
        start = to_iso_date(start_iso)
        end = to_iso_date(end_iso)
        days = inclusive_day_count(start, end) if start and end else 0

        snapshots = derive_metrics_range(document, start_iso, end_iso, unit_id, self.options)
        aggregate = aggregate_metrics(snapshots, unit_id, start or "", end or "")

        previous = None
        if days:
            prev_end = parse_iso_date(start) - timedelta(days=1)
            prev_start = prev_end - timedelta(days=days - 1)
            prev_snapshots = derive_metrics_range(
                document, prev_start.isoformat(), prev_end.isoformat(), unit_id, self.options
            )
            previous = aggregate_metrics(
                prev_snapshots, unit_id, prev_start.isoformat(), prev_end.isoformat()
            )

        days_of_therapy = self._days_of_therapy(document, unit_id, start, end)
        days_with_census = len([s for s in snapshots if s.census_count is not None])

        logger.info(
            f"Generated period summary for {unit_id} ({start}..{end}): "
            f"{aggregate.totals.new_infections} new infections, "
            f"{aggregate.totals.new_abt_starts} ABT starts"
        )

        return {
            "report_title": "IP Daily Metrics Summary",
            "generated_at": datetime.now().isoformat(),
            "unit_id": unit_id,
            "period": {
                "start": start,
                "end": end,
                "days": days,
            },
            "aggregate": aggregate.to_dict(),
            "previous_aggregate": previous.to_dict() if previous else None,
            "changes": self._changes(aggregate, previous),
            "days_of_therapy": days_of_therapy,
            "aur": round1(calculate_aur(days_of_therapy, aggregate.resident_days)),
            "data_quality": {
                "days_with_census": days_with_census,
                "census_completeness_pct": round1(days_with_census / days * 100) if days else 0.0,
            },
        }

    def generate_weekly_summary(
        self,
        document: Any,
        week_end_date: date | str | None = None,
        unit_id: Any = FACILITY,
    ) -> dict[str, Any]:
        """Seven-day summary ending on week_end_date (defaults to last Sunday)."""
        if week_end_date is None:
            today = date.today()
            days_since_sunday = (today.weekday() + 1) % 7
            week_end_date = today - timedelta(days=days_since_sunday)

        week_end = parse_iso_date(to_iso_date(week_end_date) or "")
        if week_end is None:
            logger.warning(f"Invalid week end date {week_end_date!r}")
            return self.generate_period_summary(document, None, None, unit_id)

        week_start = week_end - timedelta(days=6)
        summary = self.generate_period_summary(
            document, week_start.isoformat(), week_end.isoformat(), unit_id
        )
        summary["report_title"] = "Weekly IP Metrics Summary"
        return summary

    def _days_of_therapy(self, document: Any, unit_id: Any, start: str | None, end: str | None) -> int:
        if not start or not end:
            return 0
        aliases = self.options.unit_aliases
        scope = resolve_unit_scope(unit_id, aliases)
        records = safe_object(safe_object(document).get("records"))
        return sum(
            calculate_days_of_therapy(course, start, end, DOT_START_KEYS, DOT_END_KEYS)
            for course in get_array(records.get("abx"))
            if matches_unit(course, scope, aliases)
        )

    @staticmethod
    def _changes(current: PeriodAggregate, previous: PeriodAggregate | None) -> dict[str, float | None]:
        changes = {}
        for name in SUMMED_COUNTERS:
            prior = getattr(previous.totals, name) if previous else None
            changes[COUNTER_KEYS[name]] = calc_change(getattr(current.totals, name), prior)
        return changes
