"""Synthetic patient metrics generator with missing/malformed value injection.

Each record carries the metrics one condition's rubric reads, drawn from a
"healthy" or an "at-risk" profile. Missing and malformed values are injected
at configurable rates so the scorer's missing-data policy gets exercised.
"""

import random
from typing import Any

from src.domains.risk.models import Condition
from src.domains.risk.rubrics import RUBRICS, Rubric

from .base import BaseGenerator
from .utils.distributions import bernoulli, clipped_normal

# metric -> (healthy mean, healthy std, at-risk mean, at-risk std, min, max, decimals)
NUMERIC_PROFILES: dict[str, tuple[float, float, float, float, float, float, int | None]] = {
    "hba1c": (5.2, 0.25, 6.8, 0.8, 4.0, 14.0, 1),
    "avgGlucoseMgDl": (95, 8, 150, 25, 60, 400, None),
    "bmi": (23.0, 2.5, 31.0, 4.0, 15.0, 60.0, 1),
    "stepsDaily": (9500, 2000, 3500, 1500, 0, 40000, None),
    "sleepEfficiency": (90, 3, 78, 6, 40, 100, 1),
    "sleepDurationHours": (7.6, 0.6, 6.0, 1.0, 2.0, 14.0, 1),
    "vo2max": (42, 6, 28, 5, 10, 70, 1),
    "bpSystolic": (116, 7, 148, 12, 80, 240, None),
    "bpDiastolic": (75, 5, 94, 8, 40, 140, None),
    "sodiumIntakeMg": (2000, 400, 3600, 600, 500, 8000, None),
    "alcoholUnitsWeekly": (3, 2, 14, 6, 0, 80, 1),
    "restingHR": (62, 6, 80, 8, 40, 130, None),
    "ldl": (95, 15, 165, 30, 40, 320, None),
    "hdl": (58, 8, 38, 6, 15, 110, None),
    "triglycerides": (110, 25, 240, 60, 40, 800, None),
    "age": (42, 10, 64, 9, 18, 95, None),
    "spo2": (97.5, 0.8, 93.0, 1.5, 80, 100, 1),
    "respRate": (14, 1.5, 21, 2.5, 8, 40, None),
    "jointPainScore": (1.5, 1.0, 6.5, 1.8, 0, 10, 1),
    "gaitStabilityScore": (88, 4, 66, 8, 20, 100, 1),
    "tremorEpisodesWeekly": (1, 1.5, 28, 10, 0, 200, None),
}

# metric -> (healthy weights, at-risk weights)
CATEGORICAL_PROFILES: dict[str, tuple[dict[str, float], dict[str, float]]] = {
    "familyHistoryDiabetes": (
        {"none": 0.6, "distant": 0.25, "close": 0.1, "multiple": 0.05},
        {"none": 0.15, "distant": 0.25, "close": 0.35, "multiple": 0.25},
    ),
}

# metric -> (healthy probability, at-risk probability) of True
BOOLEAN_PROFILES: dict[str, tuple[float, float]] = {
    "smoker": (0.10, 0.45),
    "hasDiabetes": (0.05, 0.40),
}

MALFORMED_VALUES = ["n/a", "", "pending", "--"]


def rubric_metric_keys(rubric: Rubric) -> list[str]:
    """Every metric key a rubric reads, fallbacks included, in driver order."""
    keys: list[str] = []
    for driver in rubric.drivers:
        for key in driver.keys + (driver.fallback.keys if driver.fallback else ()):
            if key not in keys:
                keys.append(key)
    return keys


class MetricsGenerator(BaseGenerator):
    def generate(
        self, num_patients: int = 100, condition: str | None = None
    ) -> list[dict[str, Any]]:
        config = self.config
        conditions = [condition] if condition else config.get(
            "conditions", [c.value for c in Condition]
        )
        at_risk_rate = config.get("at_risk_rate", 0.3)

        records: list[dict[str, Any]] = []
        for _ in range(num_patients):
            cond = Condition(random.choice(conditions))
            at_risk = self._chance(at_risk_rate)
            records.append(
                {
                    "patient_id": self._uuid(),
                    "condition": cond.value,
                    "profile": "at_risk" if at_risk else "healthy",
                    "metrics": self.generate_metrics(cond, at_risk),
                }
            )
        return records

    def generate_metrics(self, condition: Condition, at_risk: bool) -> dict[str, Any]:
        """One metrics record for ``condition``, with injected gaps and junk."""
        missing_rate = self.config.get("missing_rate", 0.1)
        malformed_rate = self.config.get("malformed_rate", 0.0)

        metrics: dict[str, Any] = {}
        for key in rubric_metric_keys(RUBRICS[condition]):
            if self._chance(missing_rate):
                continue
            if self._chance(malformed_rate):
                metrics[key] = random.choice(MALFORMED_VALUES)
                continue
            metrics[key] = self._sample(key, at_risk)
        return metrics

    def _sample(self, key: str, at_risk: bool) -> Any:
        if key in NUMERIC_PROFILES:
            h_mean, h_std, r_mean, r_std, lo, hi, decimals = NUMERIC_PROFILES[key]
            mean, std = (r_mean, r_std) if at_risk else (h_mean, h_std)
            return clipped_normal(mean, std, lo, hi, decimals)
        if key in CATEGORICAL_PROFILES:
            healthy, risky = CATEGORICAL_PROFILES[key]
            return self._weighted_choice(risky if at_risk else healthy)
        if key in BOOLEAN_PROFILES:
            p_healthy, p_risky = BOOLEAN_PROFILES[key]
            return bernoulli(p_risky if at_risk else p_healthy)
        raise KeyError(f"No generation profile for metric {key!r}")
