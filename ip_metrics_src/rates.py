"""Surveillance rate definitions.

Resident-day denominators, antibiotic start counting, days of therapy
(DOT), antibiotic utilization ratio (AUR) and infection rates per 1000
resident-days.
"""

from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Iterable

from .dates import inclusive_day_count, iter_iso_dates, parse_iso_date, to_iso_date
from .fields import get_string_field, parse_number, safe_object

METRICS_DEFINITIONS = {
    "resident_days": (
        "Default denominator is sum of daily midnight census counts. Optional method "
        "uses average daily census (ADC) x days in range."
    ),
    "abt_starts": (
        "Count of new antibiotic courses with start date in range. Restarts count only "
        "when the prior course for the resident ended or was discontinued before restart."
    ),
    "dot": (
        "Days of therapy are inclusive days from start date through end/planned stop; "
        "ongoing courses are capped at report end date."
    ),
    "aur": "Antibiotic Utilization Ratio = (DOT / resident-days) x 1000.",
    "infection_rate": (
        "Infection rate per 1000 resident-days = new infection onsets in range / "
        "resident-days x 1000."
    ),
}

ABT_START_KEYS = ["startDate", "start_date"]
ABT_END_KEYS = ["endDate", "end_date", "plannedStopDate"]
ONSET_KEYS = ["onsetDate", "onset_date"]
ENDED_STATUSES = ("completed", "discontinued")


class ResidentDaysMethod(Enum):
    """How resident-days are computed for a range."""
    MIDNIGHT_CENSUS_SUM = "midnight_census_sum"
    ADC_X_DAYS = "adc_x_days"


def _in_range(iso: str | None, start: str, end: str) -> bool:
    return bool(iso) and start <= iso <= end


def calculate_resident_days(
    start_iso: str,
    end_iso: str,
    census_snapshots: Iterable[Any] = (),
    method: ResidentDaysMethod | str = ResidentDaysMethod.MIDNIGHT_CENSUS_SUM,
    adc_value: float | None = None,
) -> int | float:
    """Calculate resident-days for an inclusive date range.

    Args:
        start_iso: First day of the range
        end_iso: Last day of the range
        census_snapshots: (date, census_count) pairs or mappings with
            date/censusCount keys (DailySnapshot wire dicts work)
        method: midnight_census_sum or adc_x_days
        adc_value: Average daily census for adc_x_days

    Returns:
        Resident-days (0 for empty or invalid ranges)
    """
    method = ResidentDaysMethod(method)
    start = to_iso_date(start_iso)
    end = to_iso_date(end_iso)
    days = inclusive_day_count(start, end) if start and end else 0
    if days <= 0:
        return 0

    if method == ResidentDaysMethod.ADC_X_DAYS:
        adc = parse_number(adc_value) or 0
        total = Decimal(adc * days).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return max(0, int(total))

    by_date = {}
    for snapshot in census_snapshots:
        if isinstance(snapshot, (tuple, list)) and len(snapshot) == 2:
            day, count = snapshot
        else:
            obj = safe_object(snapshot)
            day = obj.get("date")
            count = obj.get("censusCount", obj.get("census_count"))
        day_iso = to_iso_date(day)
        amount = parse_number(count)
        if day_iso and amount is not None:
            by_date[day_iso] = amount

    return sum(by_date.get(day, 0) for day in iter_iso_dates(start, end))


def calculate_abt_starts(courses: Iterable[Any], start_iso: str, end_iso: str) -> int:
    """Count new antibiotic starts in range, ignoring continuations.

    A course counts when it is the resident's first, or when the
    resident's immediately prior course had already ended.
    """
    start = to_iso_date(start_iso)
    end = to_iso_date(end_iso)
    if not start or not end:
        return 0

    dated = []
    for course in courses:
        course_start = to_iso_date(get_string_field(course, ABT_START_KEYS))
        dated.append((course_start or "", course))
    dated.sort(key=lambda item: item[0])

    starts = 0
    for course_start, course in dated:
        if not _in_range(course_start or None, start, end):
            continue
        mrn = get_string_field(course, ["mrn"])
        prior = [
            other for other_start, other in dated
            if get_string_field(other, ["mrn"]) == mrn and other_start < course_start
        ]
        if not prior:
            starts += 1
            continue
        immediate_prior = prior[-1]
        status = get_string_field(immediate_prior, ["status"]).lower()
        if status in ENDED_STATUSES or get_string_field(immediate_prior, ABT_END_KEYS):
            starts += 1

    return starts


def calculate_days_of_therapy(
    course: Any,
    start_iso: str,
    end_iso: str,
    start_keys: list[str] = ABT_START_KEYS,
    end_keys: list[str] = ABT_END_KEYS,
) -> int:
    """Inclusive therapy days within the range; ongoing courses run to range end."""
    therapy_start = parse_iso_date(to_iso_date(get_string_field(course, start_keys)) or "")
    range_start = parse_iso_date(to_iso_date(start_iso) or "")
    range_end = parse_iso_date(to_iso_date(end_iso) or "")
    if therapy_start is None or range_start is None or range_end is None:
        return 0

    therapy_stop = parse_iso_date(to_iso_date(get_string_field(course, end_keys)) or "")
    if therapy_stop is None:
        therapy_stop = range_end

    effective_start = max(therapy_start, range_start)
    effective_stop = min(therapy_stop, range_end)
    if effective_start > effective_stop:
        return 0
    return (effective_stop - effective_start + timedelta(days=1)).days


def calculate_aur(days_of_therapy: float, resident_days: float | None) -> float:
    if not resident_days or resident_days <= 0:
        return 0.0
    return days_of_therapy / resident_days * 1000


def calculate_infection_rate_per_1000(
    ip_cases: Iterable[Any],
    start_iso: str,
    end_iso: str,
    resident_days: float | None,
) -> float:
    if not resident_days or resident_days <= 0:
        return 0.0
    start = to_iso_date(start_iso)
    end = to_iso_date(end_iso)
    if not start or not end:
        return 0.0
    new_cases = sum(
        1 for case in ip_cases
        if _in_range(to_iso_date(get_string_field(case, ONSET_KEYS)), start, end)
    )
    return new_cases / resident_days * 1000
