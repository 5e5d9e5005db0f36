"""Shared fixtures for IP daily metrics tests."""

import pytest

TEST_DATE = "2026-02-16"


@pytest.fixture
def make_db():
    """Build a unified database document."""
    def _make(records=None, census=None, **extra):
        db = {
            "schema": "UNIFIED_DB_V1",
            "records": {
                "ip_cases": [],
                "abx": [],
                "vax": [],
                "outbreaks": [],
                "line_listings": [],
                **(records or {}),
            },
            **extra,
        }
        if census is not None:
            db["census"] = census
        return db
    return _make


@pytest.fixture
def ip_case():
    def _make(**fields):
        return {"unit": "Unit 2", "onsetDate": "2026-02-15", **fields}
    return _make


@pytest.fixture
def abx():
    def _make(**fields):
        return {"unit": "Unit 2", "startDate": "2026-02-15", **fields}
    return _make


@pytest.fixture
def vax():
    def _make(**fields):
        return {"unit": "Unit 2", "status": "due", **fields}
    return _make


@pytest.fixture
def line():
    def _make(**fields):
        return {"unit": "Unit 2", "onsetDate": TEST_DATE, **fields}
    return _make


@pytest.fixture
def census_row():
    def _make(**fields):
        return {"unit": "Unit 2", "censusCount": 1, **fields}
    return _make
