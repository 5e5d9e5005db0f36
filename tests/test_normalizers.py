"""Tests for interval activity and domain normalizers."""

import pytest

from ip_metrics_src.normalizers import (
    infer_end_date,
    infer_start_date,
    is_active_on_date,
    normalize_abx,
    normalize_ip_case,
    normalize_line_listing,
    normalize_outbreak,
    normalize_vax,
)

TEST_DATE = "2026-02-16"


class TestIsActiveOnDate:
    """Test half-open interval activity."""

    @pytest.mark.parametrize("start,end,target,expected", [
        ("2026-02-15", None, TEST_DATE, True),
        ("2026-02-17", None, TEST_DATE, False),
        ("2026-02-16", "2026-02-16", TEST_DATE, True),
        ("2026-02-10", "2026-02-15", TEST_DATE, False),
        ("2026-02-10", "2026-02-20", TEST_DATE, True),
        (None, None, TEST_DATE, False),
        ("2026-02-10", None, "", False),
    ])
    def test_cases(self, start, end, target, expected):
        assert is_active_on_date(start, end, target) is expected

    def test_open_interval_includes_its_start(self):
        assert is_active_on_date(TEST_DATE, None, TEST_DATE)

    def test_end_boundary_inclusive(self):
        assert is_active_on_date("2026-02-01", TEST_DATE, TEST_DATE)


class TestInferDates:
    """Test flexible start/end key support."""

    def test_alternate_keys(self):
        assert infer_start_date({"beginDate": TEST_DATE}) == TEST_DATE
        assert infer_end_date({"stopDate": TEST_DATE}) == TEST_DATE

    def test_onset_preferred_over_precaution_start(self):
        record = {"precautionStartDate": "2026-02-12", "onsetDate": "2026-02-15"}
        assert infer_start_date(record) == "2026-02-15"

    def test_null_onset_falls_through(self):
        assert infer_start_date({"onsetDate": None, "initiationDate": TEST_DATE}) == TEST_DATE

    def test_unparseable_date_is_none(self):
        assert infer_start_date({"onsetDate": "bad-date"}) is None


class TestDomainNormalizers:
    """Test canonical shapes produced from raw records."""

    def test_ip_case(self):
        case = normalize_ip_case({
            "unitId": "Unit 2",
            "onsetDate": TEST_DATE,
            "dischargeDate": "02/20/2026",
            "isolationType": "Contact",
            "sourceCondition": "UTI",
            "organism": "MRSA",
            "cultureDate": TEST_DATE,
            "labResults": "positive",
        })
        assert case.unit_id == "Unit 2"
        assert case.start_iso == TEST_DATE
        assert case.end_iso == "2026-02-20"
        assert case.protocol == "Contact"
        assert case.infection_type == "UTI"
        assert case.pathogen == "MRSA"
        assert case.culture_date_iso == TEST_DATE
        assert case.culture_result == "positive"

    def test_ip_case_from_empty_record(self):
        case = normalize_ip_case(None)
        assert case.unit_id is None
        assert case.start_iso is None
        assert case.protocol == ""
        assert case.culture_result == ""

    def test_abx(self):
        course = normalize_abx(
            {"locationUnit": "2N", "beginDate": TEST_DATE, "discontinueDate": "2026-02-20",
             "indication": " PNA ", "reviewDate": TEST_DATE, "reviewOutcomeDate": "2026-02-17"},
            {"2N": "Unit 2"},
        )
        assert course.unit_id == "Unit 2"
        assert course.start_iso == TEST_DATE
        assert course.end_iso == "2026-02-20"
        assert course.indication == "PNA"
        assert course.timeout_review_iso == TEST_DATE
        assert course.timeout_outcome_iso == "2026-02-17"

    def test_vax_status_lower_cased(self):
        dose = normalize_vax({"wing": "Unit 2", "status": "GIVEN", "givenDate": TEST_DATE,
                              "educationDate": "2026-02-10", "dueDate": "2026-03-01"})
        assert dose.unit_id == "Unit 2"
        assert dose.status == "given"
        assert dose.given_iso == TEST_DATE
        assert dose.offer_iso == "2026-02-10"
        assert dose.due_iso == "2026-03-01"

    def test_outbreak(self):
        outbreak = normalize_outbreak({"status": "Active", "dateStart": "2026-02-01", "resolvedDate": "2026-02-28"})
        assert outbreak.status == "active"
        assert outbreak.start_iso == "2026-02-01"
        assert outbreak.end_iso == "2026-02-28"

    def test_line_listing_outbreak_link_optional(self):
        linked = normalize_line_listing({"unit": "Unit 2", "symptomOnsetDate": TEST_DATE, "outbreak_id": "ob-1"})
        unlinked = normalize_line_listing({"unit": "Unit 2", "onsetDate": TEST_DATE})
        assert linked.onset_iso == TEST_DATE
        assert linked.outbreak_id == "ob-1"
        assert unlinked.outbreak_id is None

    def test_raw_record_not_mutated(self):
        record = {"unit": " Unit   2 ", "onsetDate": "02/16/2026"}
        snapshot = dict(record)
        normalize_ip_case(record)
        assert record == snapshot
