"""Shared test fixtures for clinical risk engine tests."""

import pytest

from src.domains.risk.rubrics import Rubric
from src.domains.risk.scoring import RiskScorer


@pytest.fixture
def scorer() -> RiskScorer:
    return RiskScorer()


@pytest.fixture
def high_risk_diabetes_metrics() -> dict:
    """Poor glycemic control, obese, sedentary, close family history."""
    return {
        "hba1c": 7.0,
        "bmi": 30,
        "stepsDaily": 4000,
        "sleepEfficiency": 80,
        "familyHistoryDiabetes": "close",
    }


@pytest.fixture
def low_risk_diabetes_metrics() -> dict:
    """Normal HbA1c, healthy weight, active, no family history."""
    return {
        "hba1c": 5.0,
        "bmi": 22,
        "stepsDaily": 11000,
        "sleepEfficiency": 90,
        "familyHistoryDiabetes": "none",
    }


@pytest.fixture
def cardiac_metrics() -> dict:
    """Moderately elevated cardiac profile without HDL."""
    return {
        "ldl": 130,
        "triglycerides": 150,
        "bpSystolic": 130,
        "bpDiastolic": 85,
        "age": 50,
    }


def driver_named(rubric: Rubric, name: str):
    for driver in rubric.drivers:
        if driver.name == name:
            return driver
    raise KeyError(name)
