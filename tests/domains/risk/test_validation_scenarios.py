"""Validation tests for risk scoring against representative patient profiles.

Each scenario pairs a clinical picture with the band its score should land
in, so rubric edits that shift a whole population are caught.
"""

import pytest

from src.domains.risk.models import RiskLevel
from src.domains.risk.scoring import RiskScorer


@pytest.fixture
def scorer() -> RiskScorer:
    return RiskScorer()


class TestScenarioDiabetesContrast:
    """Poorly controlled vs well controlled diabetes profile.

    Expected: the poorly controlled record scores at least 20 points higher.
    """

    def test_gap_of_at_least_20(
        self, scorer, high_risk_diabetes_metrics, low_risk_diabetes_metrics
    ):
        high = scorer.compute_risk("diabetes", high_risk_diabetes_metrics)
        low = scorer.compute_risk("diabetes", low_risk_diabetes_metrics)
        assert high - low >= 20

    def test_levels(self, scorer, high_risk_diabetes_metrics, low_risk_diabetes_metrics):
        assert scorer.assess("diabetes", high_risk_diabetes_metrics).risk_level in (
            RiskLevel.HIGH,
            RiskLevel.VERY_HIGH,
        )
        assert scorer.assess("diabetes", low_risk_diabetes_metrics).risk_level == RiskLevel.LOW


class TestScenarioStage2Hypertension:
    """150/95 mmHg reading.

    Expected: blood pressure driver staged "stage 2" with a base of at least 35.
    """

    def test_stage_2_band(self, scorer):
        assessment = scorer.assess(
            "hypertension", {"bpSystolic": 150, "bpDiastolic": 95}, include_trajectory=False
        )
        bp = assessment.contributions[0]
        assert bp.driver == "bloodPressure"
        assert bp.detail.startswith("stage 2")
        assert bp.points >= 35

    def test_lifestyle_factors_push_higher(self, scorer):
        reading = {"bpSystolic": 150, "bpDiastolic": 95}
        lifestyle = {
            **reading,
            "sodiumIntakeMg": 4000,
            "bmi": 36,
            "alcoholUnitsWeekly": 25,
            "stepsDaily": 1000,
            "restingHR": 90,
        }
        assert scorer.compute_risk("hypertension", lifestyle) > scorer.compute_risk(
            "hypertension", reading
        )


class TestScenarioCardiacSmoker:
    """Older smoker with diabetes, high LDL and low HDL.

    Expected: very high heart-disease risk; a favourable lipid profile in a
    non-smoker lands low.
    """

    def test_high_risk_smoker(self, scorer):
        metrics = {
            "ldl": 190,
            "hdl": 35,
            "triglycerides": 260,
            "bpSystolic": 150,
            "bpDiastolic": 92,
            "age": 68,
            "smoker": True,
            "hasDiabetes": True,
            "stepsDaily": 2500,
        }
        assert scorer.assess("heart-disease", metrics).risk_level == RiskLevel.VERY_HIGH

    def test_favourable_profile(self, scorer):
        metrics = {
            "ldl": 75,
            "hdl": 72,
            "triglycerides": 90,
            "bpSystolic": 115,
            "bpDiastolic": 72,
            "age": 36,
            "smoker": False,
            "hasDiabetes": False,
            "stepsDaily": 11000,
        }
        assert scorer.assess("heart-disease", metrics).risk_level == RiskLevel.LOW


class TestScenarioWearableOnlyParkinsons:
    """Unstable gait and frequent tremor episodes from a wearable.

    Expected: at least high risk even without sleep or activity data.
    """

    def test_wearable_signals(self, scorer):
        score = scorer.compute_risk(
            "parkinsons", {"gaitStabilityScore": 62, "tremorEpisodesWeekly": 40}
        )
        assert score >= 60


class TestScenarioSparseRecord:
    """Patient with no metrics on file for any condition.

    Expected: every condition yields a bounded, penalty-only score and the
    rationale mentions the missing data.
    """

    @pytest.mark.parametrize(
        "condition",
        ["diabetes", "hypertension", "heart-disease", "asthma", "arthritis", "parkinsons"],
    )
    def test_penalty_only(self, scorer, condition):
        assessment = scorer.assess(condition, {})
        assert 0 <= assessment.score <= 100
        assert all(c.status == "missing" for c in assessment.contributions)
        assert "lacked data" in assessment.rationale
