"""Daily IP metrics derivation.

Turns one day's worth of raw records from the unified database document
into a DailySnapshot for a unit scope or the whole facility. Every
counter is computed independently from the normalized records; records
with missing or unparseable dates simply don't match date-based counters.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from .census import census_count_for
from .config import DeriveOptions, resolve_options
from .dates import add_hours_to_iso_date, sanitize_iso_date, to_iso_date
from .fields import get_array, safe_object
from .models import DailySnapshot
from .normalizers import (
    explicit_precaution_start,
    is_active_on_date,
    normalize_abx,
    normalize_ip_case,
    normalize_line_listing,
    normalize_outbreak,
    normalize_vax,
)
from .units import FACILITY, matches_unit, normalize_unit

logger = logging.getLogger(__name__)


def round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def contains_any_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    source = text.lower()
    return any(keyword.lower() in source for keyword in keywords)


def resolve_unit_scope(unit_id: Any, unit_aliases: Mapping[str, str] | None = None) -> Any:
    if unit_id == FACILITY:
        return FACILITY
    return normalize_unit(unit_id, unit_aliases) or unit_id


def _scoped(records: Any, unit_scope: Any, unit_aliases: Mapping[str, str]) -> list:
    return [rec for rec in get_array(records) if matches_unit(rec, unit_scope, unit_aliases)]


def derive_daily_metrics(
    document: Any,
    date_iso: Any,
    unit_id: Any = FACILITY,
    options: DeriveOptions | Mapping[str, Any] | None = None,
) -> DailySnapshot:
    """Derive the daily surveillance snapshot.

    Args:
        document: Unified database document ({"records": {...}, "census": [...]})
        date_iso: Target date (any format the date normalizer accepts)
        unit_id: Unit identifier or "facility"
        options: DeriveOptions or an equivalent mapping

    Returns:
        DailySnapshot with every counter populated
    """
    opts = resolve_options(options)
    aliases = opts.unit_aliases
    records = safe_object(safe_object(document).get("records"))
    target = sanitize_iso_date(date_iso)
    target_valid = to_iso_date(target) is not None
    scope = resolve_unit_scope(unit_id, aliases)

    ip_raw = _scoped(records.get("ip_cases"), scope, aliases)
    ip_cases = [(rec, normalize_ip_case(rec, aliases)) for rec in ip_raw]
    courses = [normalize_abx(rec, aliases) for rec in _scoped(records.get("abx"), scope, aliases)]
    vaccinations = [normalize_vax(rec, aliases) for rec in _scoped(records.get("vax"), scope, aliases)]
    # Outbreaks are facility-level and never unit-filtered
    outbreaks = [normalize_outbreak(rec) for rec in get_array(records.get("outbreaks"))]
    line_entries = [
        normalize_line_listing(rec, aliases)
        for rec in _scoped(records.get("line_listings"), scope, aliases)
    ]

    def active_on_target(start_iso, end_iso) -> bool:
        # An unparseable target keeps its text for reporting but matches nothing
        return target_valid and is_active_on_date(start_iso, end_iso, target)

    active_cases = [case for _, case in ip_cases if active_on_target(case.start_iso, case.end_iso)]

    def precaution_started_today(raw: Any, case) -> bool:
        explicit = explicit_precaution_start(raw)
        if explicit:
            return explicit == target
        return case.start_iso == target

    active_courses = [c for c in courses if active_on_target(c.start_iso, c.end_iso)]
    with_indication = sum(1 for c in active_courses if c.indication.strip())
    indication_pct = (
        round1(with_indication / len(active_courses) * 100) if active_courses else 0.0
    )

    census = census_count_for(document, scope, aliases)

    snapshot = DailySnapshot(
        date=target,
        unit_id=scope,
        census_count=census,
        resident_days=census,
        new_infections=sum(1 for _, case in ip_cases if case.start_iso == target),
        active_ip_cases=len(active_cases),
        residents_on_ebp=sum(
            1 for case in active_cases if contains_any_keyword(case.protocol, opts.ebp_keywords)
        ),
        new_precautions_initiated=sum(
            1 for raw, case in ip_cases if precaution_started_today(raw, case)
        ),
        precautions_discontinued=sum(1 for _, case in ip_cases if case.end_iso == target),
        mdro_active=sum(
            1 for case in active_cases if contains_any_keyword(case.pathogen, opts.mdro_keywords)
        ),
        cultures_collected_today=sum(1 for _, case in ip_cases if case.culture_date_iso == target),
        cultures_pending_followup=sum(
            1 for _, case in ip_cases
            if case.culture_date_iso and not case.culture_result.strip()
        ),
        new_abt_starts=sum(1 for c in courses if c.start_iso == target),
        active_abt_courses=len(active_courses),
        abx_with_indication_pct=indication_pct,
        abx_timeouts_due_today=sum(
            1 for c in active_courses
            if c.start_iso and add_hours_to_iso_date(c.start_iso, opts.timeout_hours) == target
        ),
        abx_timeouts_completed_today=sum(
            1 for c in courses
            if c.timeout_review_iso == target or c.timeout_outcome_iso == target
        ),
        vaccines_given_today=sum(
            1 for v in vaccinations if v.status == "given" and v.given_iso == target
        ),
        vax_declines_today=sum(
            1 for v in vaccinations if v.status == "declined" and v.offer_iso == target
        ),
        vax_due_count=sum(1 for v in vaccinations if v.status == "due"),
        vax_overdue_count=sum(1 for v in vaccinations if v.status == "overdue"),
        outbreaks_active_today=sum(
            1 for o in outbreaks
            if o.status == "active" or active_on_target(o.start_iso, o.end_iso)
        ),
        outbreak_cases_today=sum(1 for entry in line_entries if entry.onset_iso == target),
    )

    logger.debug(
        f"Derived {target} for {scope}: {len(ip_cases)} IP cases, {len(courses)} ABX courses, "
        f"{len(vaccinations)} vaccinations, {len(outbreaks)} outbreaks, "
        f"{len(line_entries)} line-listing entries, census={census}"
    )
    return snapshot
