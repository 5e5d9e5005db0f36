"""Domain normalizers.

Map raw IP case, antibiotic, vaccination, outbreak and line-listing
records onto fixed canonical shapes. Raw records are never mutated.
"""

from typing import Any, Mapping

from .dates import to_iso_date
from .fields import get_string_field
from .models import AntibioticCourse, IPCase, LineListingEntry, Outbreak, Vaccination
from .units import get_unit_from_record

IP_START_KEYS = ["onsetDate", "precautionStartDate", "initiationDate", "startDate", "beginDate"]
IP_END_KEYS = ["resolutionDate", "precautionEndDate", "dischargeDate", "endDate", "stopDate"]
IP_PROTOCOL_KEYS = ["protocol", "isolationType", "precautionType"]
IP_INFECTION_TYPE_KEYS = ["infectionType", "sourceCondition", "sourceOfInfection"]
IP_PATHOGEN_KEYS = ["pathogen", "organism", "suspectedOrConfirmedOrganism"]
IP_CULTURE_DATE_KEYS = ["collectionDateTime", "cultureCollectionDate", "cultureDate"]
IP_CULTURE_RESULT_KEYS = ["cultureResult", "labResults"]
PRECAUTION_START_KEYS = ["precautionStartDate"]

ABX_START_KEYS = ["startDate", "beginDate", "initiationDate"]
ABX_END_KEYS = ["endDate", "stopDate", "discontinueDate"]
ABX_INDICATION_KEYS = ["indication"]
ABX_TIMEOUT_REVIEW_KEYS = ["timeoutReviewDate", "reviewDate", "nextReviewDate"]
ABX_TIMEOUT_OUTCOME_KEYS = ["timeoutOutcomeDate", "reviewOutcomeDate"]

VAX_STATUS_KEYS = ["status"]
VAX_GIVEN_KEYS = ["dateGiven", "givenDate"]
VAX_OFFER_KEYS = ["offerDate", "educationDate"]
VAX_DUE_KEYS = ["dueDate"]

OUTBREAK_STATUS_KEYS = ["status"]
OUTBREAK_START_KEYS = ["startDate", "dateStart", "onsetDate"]
OUTBREAK_END_KEYS = ["endDate", "dateEnd", "resolvedDate"]

LINE_ONSET_KEYS = ["onsetDate", "symptomOnsetDate"]
LINE_OUTBREAK_ID_KEYS = ["outbreakId", "outbreak_id", "outbreakUUID"]


def _date_field(record: Any, keys: list[str]) -> str | None:
    return to_iso_date(get_string_field(record, keys))


def is_active_on_date(start_iso: str | None, end_iso: str | None, target_iso: str) -> bool:
    """Check whether an interval covers the target date.

    Not active before it starts; open-ended intervals stay active; the
    end date itself still counts as active.
    """
    if not start_iso or not target_iso:
        return False
    if start_iso > target_iso:
        return False
    if not end_iso:
        return True
    return end_iso >= target_iso


def infer_start_date(record: Any) -> str | None:
    return _date_field(record, IP_START_KEYS)


def infer_end_date(record: Any) -> str | None:
    return _date_field(record, IP_END_KEYS)


def explicit_precaution_start(record: Any) -> str | None:
    return _date_field(record, PRECAUTION_START_KEYS)


def normalize_ip_case(record: Any, unit_aliases: Mapping[str, str] | None = None) -> IPCase:
    return IPCase(
        unit_id=get_unit_from_record(record, unit_aliases),
        start_iso=infer_start_date(record),
        end_iso=infer_end_date(record),
        protocol=get_string_field(record, IP_PROTOCOL_KEYS),
        infection_type=get_string_field(record, IP_INFECTION_TYPE_KEYS),
        pathogen=get_string_field(record, IP_PATHOGEN_KEYS),
        culture_date_iso=_date_field(record, IP_CULTURE_DATE_KEYS),
        culture_result=get_string_field(record, IP_CULTURE_RESULT_KEYS),
    )


def normalize_abx(record: Any, unit_aliases: Mapping[str, str] | None = None) -> AntibioticCourse:
    return AntibioticCourse(
        unit_id=get_unit_from_record(record, unit_aliases),
        start_iso=_date_field(record, ABX_START_KEYS),
        end_iso=_date_field(record, ABX_END_KEYS),
        indication=get_string_field(record, ABX_INDICATION_KEYS),
        timeout_review_iso=_date_field(record, ABX_TIMEOUT_REVIEW_KEYS),
        timeout_outcome_iso=_date_field(record, ABX_TIMEOUT_OUTCOME_KEYS),
    )


def normalize_vax(record: Any, unit_aliases: Mapping[str, str] | None = None) -> Vaccination:
    return Vaccination(
        unit_id=get_unit_from_record(record, unit_aliases),
        status=get_string_field(record, VAX_STATUS_KEYS).lower(),
        given_iso=_date_field(record, VAX_GIVEN_KEYS),
        offer_iso=_date_field(record, VAX_OFFER_KEYS),
        due_iso=_date_field(record, VAX_DUE_KEYS),
    )


def normalize_outbreak(record: Any) -> Outbreak:
    return Outbreak(
        status=get_string_field(record, OUTBREAK_STATUS_KEYS).lower(),
        start_iso=_date_field(record, OUTBREAK_START_KEYS),
        end_iso=_date_field(record, OUTBREAK_END_KEYS),
    )


def normalize_line_listing(
    record: Any,
    unit_aliases: Mapping[str, str] | None = None,
) -> LineListingEntry:
    outbreak_id = get_string_field(record, LINE_OUTBREAK_ID_KEYS)
    return LineListingEntry(
        unit_id=get_unit_from_record(record, unit_aliases),
        onset_iso=_date_field(record, LINE_ONSET_KEYS),
        outbreak_id=outbreak_id or None,
    )
