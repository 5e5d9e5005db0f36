"""Data models for IP daily metrics."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .fields import parse_number, safe_object

SNAPSHOT_SCHEMA = "DAILY_IP_METRICS_V1"

# Python attribute -> wire key
COUNTER_KEYS = {
    "new_infections": "newInfections",
    "active_ip_cases": "activeIPCases",
    "residents_on_ebp": "residentsOnEBP",
    "new_precautions_initiated": "newPrecautionsInitiated",
    "precautions_discontinued": "precautionsDiscontinued",
    "mdro_active": "mdroActive",
    "cultures_collected_today": "culturesCollectedToday",
    "cultures_pending_followup": "culturesPendingFollowup",
    "new_abt_starts": "newABTStarts",
    "active_abt_courses": "activeABTCourses",
    "abx_with_indication_pct": "abxWithIndicationPct",
    "abx_timeouts_due_today": "abxTimeoutsDueToday",
    "abx_timeouts_completed_today": "abxTimeoutsCompletedToday",
    "vaccines_given_today": "vaccinesGivenToday",
    "vax_declines_today": "vaxDeclinesToday",
    "vax_due_count": "vaxDueCount",
    "vax_overdue_count": "vaxOverdueCount",
    "outbreaks_active_today": "outbreaksActiveToday",
    "outbreak_cases_today": "outbreakCasesToday",
}

# Counters that are summed directly when aggregating
SUMMED_COUNTERS = tuple(name for name in COUNTER_KEYS if name != "abx_with_indication_pct")


@dataclass(frozen=True)
class IPCase:
    """Canonical infection-prevention case."""
    unit_id: Optional[str]
    start_iso: Optional[str]
    end_iso: Optional[str]
    protocol: str
    infection_type: str
    pathogen: str
    culture_date_iso: Optional[str]
    culture_result: str


@dataclass(frozen=True)
class AntibioticCourse:
    """Canonical antibiotic course."""
    unit_id: Optional[str]
    start_iso: Optional[str]
    end_iso: Optional[str]
    indication: str
    timeout_review_iso: Optional[str]
    timeout_outcome_iso: Optional[str]


@dataclass(frozen=True)
class Vaccination:
    unit_id: Optional[str]
    status: str  # lower-cased
    given_iso: Optional[str]
    offer_iso: Optional[str]
    due_iso: Optional[str]


@dataclass(frozen=True)
class Outbreak:
    status: str  # lower-cased
    start_iso: Optional[str]
    end_iso: Optional[str]


@dataclass(frozen=True)
class LineListingEntry:
    unit_id: Optional[str]
    onset_iso: Optional[str]
    outbreak_id: Optional[str] = None


@dataclass(frozen=True)
class MetricTotals:
    """The named surveillance counters shared by snapshots and aggregates."""
    new_infections: int = 0
    active_ip_cases: int = 0
    residents_on_ebp: int = 0
    new_precautions_initiated: int = 0
    precautions_discontinued: int = 0
    mdro_active: int = 0
    cultures_collected_today: int = 0
    cultures_pending_followup: int = 0

    new_abt_starts: int = 0
    active_abt_courses: int = 0
    abx_with_indication_pct: float = 0.0
    abx_timeouts_due_today: int = 0
    abx_timeouts_completed_today: int = 0

    vaccines_given_today: int = 0
    vax_declines_today: int = 0
    vax_due_count: int = 0
    vax_overdue_count: int = 0

    outbreaks_active_today: int = 0
    outbreak_cases_today: int = 0

    def counters_dict(self) -> dict:
        return {wire: getattr(self, name) for name, wire in COUNTER_KEYS.items()}

    def to_dict(self) -> dict:
        return self.counters_dict()


@dataclass(frozen=True)
class DailySnapshot(MetricTotals):
    """Metrics for one (date, unit scope) pair.

    census_count and resident_days always carry the same value; None
    means no census data was available.
    """
    date: str = ""
    unit_id: Optional[str] = None
    census_count: Optional[int | float] = None
    resident_days: Optional[int | float] = None
    schema: str = SNAPSHOT_SCHEMA

    def totals(self) -> MetricTotals:
        return MetricTotals(**{name: getattr(self, name) for name in COUNTER_KEYS})

    def to_dict(self) -> dict:
        return {
            "schema": self.schema,
            "date": self.date,
            "unitId": self.unit_id,
            "censusCount": self.census_count,
            "residentDays": self.resident_days,
            **self.counters_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DailySnapshot":
        """Rebuild a snapshot from its wire shape (or snake_case keys).

        Missing or non-numeric counters read as 0.
        """
        data = safe_object(data)

        def pick(*keys):
            for key in keys:
                if key in data:
                    return data[key]
            return None

        counters = {}
        for name, wire in COUNTER_KEYS.items():
            value = parse_number(pick(wire, name))
            counters[name] = value if value is not None and value >= 0 else 0

        census = parse_number(pick("censusCount", "census_count"))
        resident_days = parse_number(pick("residentDays", "resident_days"))
        date_value = pick("date")
        return cls(
            date=date_value if isinstance(date_value, str) else "",
            unit_id=pick("unitId", "unit_id"),
            census_count=census,
            resident_days=resident_days,
            schema=pick("schema") or SNAPSHOT_SCHEMA,
            **counters,
        )


@dataclass(frozen=True)
class RatesPer1000ResidentDays:
    new_infections: float
    new_abt_starts: float

    def to_dict(self) -> dict:
        return {
            "newInfections": self.new_infections,
            "newABTStarts": self.new_abt_starts,
        }


@dataclass(frozen=True)
class PeriodAggregate:
    """Summed/weighted metrics over a date range.

    rates is only present when resident_days is a positive number.
    """
    unit_id: Optional[str]
    start_iso: str
    end_iso: str
    resident_days: Optional[int | float]
    totals: MetricTotals
    rates: Optional[RatesPer1000ResidentDays] = None

    def to_dict(self) -> dict:
        result = {
            "unitId": self.unit_id,
            "startISO": self.start_iso,
            "endISO": self.end_iso,
            "residentDays": self.resident_days,
            "totals": self.totals.to_dict(),
        }
        if self.rates is not None:
            result["ratesPer1000ResidentDays"] = self.rates.to_dict()
        return result
