"""IP Daily Metrics Module.

Derives auditable daily infection-prevention surveillance snapshots from
loosely-structured clinical records, per care unit or facility-wide, and
aggregates them over date ranges with resident-day rate normalization.

Record collections consumed:
- ip_cases: Infections and isolation/precaution episodes
- abx: Antibiotic courses (time-outs, indications)
- vax: Vaccination offers, doses and declines
- outbreaks / line_listings: Outbreak status and per-case onset rows
- census: Unit head counts (resident-day denominator)

Note: Every derivation is a pure function of its inputs; nothing is cached
or persisted.
"""

from .aggregator import aggregate_metrics, derive_metrics_range
from .census import census_count_for
from .config import config, DeriveOptions, IPMetricsConfig, resolve_options
from .dates import to_iso_date
from .deriver import derive_daily_metrics
from .fields import get_string_field
from .models import (
    AntibioticCourse,
    DailySnapshot,
    IPCase,
    LineListingEntry,
    MetricTotals,
    Outbreak,
    PeriodAggregate,
    RatesPer1000ResidentDays,
    Vaccination,
)
from .normalizers import (
    infer_end_date,
    infer_start_date,
    is_active_on_date,
    normalize_abx,
    normalize_ip_case,
    normalize_line_listing,
    normalize_outbreak,
    normalize_vax,
)
from .reports import MetricsReporter
from .units import FACILITY, get_unit_from_record, matches_unit, normalize_unit

__all__ = [
    # Derivation
    "derive_daily_metrics",
    "derive_metrics_range",
    "aggregate_metrics",
    "census_count_for",
    # Config
    "config",
    "DeriveOptions",
    "IPMetricsConfig",
    "resolve_options",
    # Primitives
    "to_iso_date",
    "get_string_field",
    "FACILITY",
    "normalize_unit",
    "get_unit_from_record",
    "matches_unit",
    "is_active_on_date",
    # Normalizers
    "infer_start_date",
    "infer_end_date",
    "normalize_ip_case",
    "normalize_abx",
    "normalize_vax",
    "normalize_outbreak",
    "normalize_line_listing",
    # Models
    "IPCase",
    "AntibioticCourse",
    "Vaccination",
    "Outbreak",
    "LineListingEntry",
    "MetricTotals",
    "DailySnapshot",
    "PeriodAggregate",
    "RatesPer1000ResidentDays",
    # Reports
    "MetricsReporter",
]
