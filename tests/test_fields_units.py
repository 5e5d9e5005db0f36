"""Tests for field resolution and unit matching."""

import pytest

from ip_metrics_src.fields import get_array, get_string_field, parse_number, safe_object
from ip_metrics_src.units import FACILITY, get_unit_from_record, matches_unit, normalize_unit

ALIASES = {"2N": "Unit 2", "unit ii": "Unit 2"}


class TestGetStringField:
    """Test first-match-wins field resolution."""

    def test_first_non_empty_candidate_wins(self):
        record = {"onsetDate": "  ", "precautionStartDate": " 2026-02-16 ", "startDate": "2026-01-01"}
        assert get_string_field(record, ["onsetDate", "precautionStartDate", "startDate"]) == "2026-02-16"

    def test_candidate_order_not_record_order(self):
        record = {"b": "second", "a": "first"}
        assert get_string_field(record, ["a", "b"]) == "first"

    @pytest.mark.parametrize("value,expected", [
        (5, "5"),
        (5.0, "5"),
        (2.5, "2.5"),
        (0, "0"),
    ])
    def test_numbers_become_strings(self, value, expected):
        assert get_string_field({"count": value}, ["count"]) == expected

    @pytest.mark.parametrize("value", [None, True, False, float("nan"), float("inf"), [], {"x": 1}])
    def test_unusable_values_are_skipped(self, value):
        assert get_string_field({"a": value, "b": "fallback"}, ["a", "b"]) == "fallback"

    def test_key_matching_is_case_and_whitespace_tolerant(self):
        assert get_string_field({" OnsetDate ": "2026-02-16"}, ["onsetDate"]) == "2026-02-16"

    def test_exact_key_preferred(self):
        record = {"ONSETDATE": "2026-01-01", "onsetDate": "2026-02-16"}
        assert get_string_field(record, ["onsetDate"]) == "2026-02-16"

    @pytest.mark.parametrize("record", [None, 42, "text", ["onsetDate"]])
    def test_non_mapping_record(self, record):
        assert get_string_field(record, ["onsetDate"]) == ""


class TestCoercionHelpers:
    """Test defensive coercion of shapes."""

    def test_safe_object(self):
        assert safe_object({"a": 1}) == {"a": 1}
        assert safe_object(None) == {}
        assert safe_object([1, 2]) == {}

    def test_get_array(self):
        assert get_array([1, 2]) == [1, 2]
        assert get_array(None) == []
        assert get_array("not a list") == []

    @pytest.mark.parametrize("value,expected", [
        (10, 10),
        (2.5, 2.5),
        ("12", 12),
        (" 7.5 ", 7.5),
        ("", None),
        ("abc", None),
        ("nan", None),
        (True, None),
        (None, None),
        (float("inf"), None),
    ])
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected


class TestNormalizeUnit:
    """Test unit label normalization and aliasing."""

    def test_collapses_whitespace(self):
        assert normalize_unit("  Unit    2 ") == "Unit 2"

    def test_exact_alias(self):
        assert normalize_unit("2N", ALIASES) == "Unit 2"

    def test_case_insensitive_alias(self):
        assert normalize_unit(" Unit II ", ALIASES) == "Unit 2"
        assert normalize_unit("2n", ALIASES) == "Unit 2"

    def test_unaliased_label_passes_through(self):
        assert normalize_unit("Unit 3", ALIASES) == "Unit 3"

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_empty_is_none(self, raw):
        assert normalize_unit(raw) is None

    def test_numeric_label(self):
        assert normalize_unit(5) == "5"

    def test_blank_alias_target_ignored(self):
        assert normalize_unit("2N", {"2N": "  "}) == "2N"


class TestUnitMatching:
    """Test record-to-scope matching."""

    @pytest.mark.parametrize("record,expected", [
        ({"unit": "Unit 2"}, "Unit 2"),
        ({"unitId": "Unit 2"}, "Unit 2"),
        ({"locationUnit": "Unit 2"}, "Unit 2"),
        ({"floor": "Unit 2"}, "Unit 2"),
        ({"wing": "Unit 2"}, "Unit 2"),
        ({"name": "no unit"}, None),
    ])
    def test_get_unit_from_record(self, record, expected):
        assert get_unit_from_record(record) == expected

    @pytest.mark.parametrize("record", [{}, None, 42, {"unit": "Unit 9"}, {"unit": ""}])
    def test_facility_matches_everything(self, record):
        assert matches_unit(record, FACILITY, ALIASES)

    def test_alias_applied_to_record_and_scope(self):
        assert matches_unit({"unit": "2N"}, "Unit 2", ALIASES)
        assert matches_unit({"unit": "Unit 2"}, "unit ii", ALIASES)

    def test_other_unit_does_not_match(self):
        assert not matches_unit({"unit": "Unit 3"}, "Unit 2", ALIASES)

    def test_record_without_unit_does_not_match(self):
        assert not matches_unit({}, "Unit 2")

    def test_empty_scope_matches_nothing(self):
        assert not matches_unit({"unit": "Unit 2"}, "")
