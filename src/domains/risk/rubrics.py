"""Per-condition risk rubrics.

Each rubric is an ordered driver table plus a baseline offset, a default
missing-data penalty and the week-to-week volatility used for trajectory
projection. Tables are built once at import and exposed read-only through
``RUBRICS``.
"""

import math
from dataclasses import dataclass
from types import MappingProxyType

from .drivers import (
    Bucket,
    Category,
    Driver,
    band,
    category,
    continuous,
    discrete,
    inverse,
    protective,
)
from .models import Condition

OPTIONAL = 0.0


@dataclass(frozen=True)
class Rubric:
    condition: Condition
    label: str
    drivers: tuple[Driver, ...]
    baseline: float = 0.0
    missing_penalty: float = 5.0
    volatility: int = 4


def _bp_extras() -> tuple[Driver, ...]:
    return (
        continuous("bpSystolic", band(120, 180, 0, 15)),
        continuous("bpDiastolic", band(80, 110, 0, 10)),
    )


# Most severe first; the first matching category sets the base. Open-ended
# bands use infinite bounds.
BP_CATEGORIES: tuple[Category, ...] = (
    Category(
        "severe", systolic=(160, math.inf), diastolic=(100, math.inf), base=50, either=True
    ),
    Category("stage 2", systolic=(140, 160), diastolic=(90, 100), base=35, either=True),
    Category("stage 1", systolic=(130, 140), diastolic=(80, 90), base=20, either=True),
    Category("elevated", systolic=(120, 130), diastolic=(-math.inf, 80), base=8),
    Category("normal", systolic=(-math.inf, 120), diastolic=(-math.inf, 80), base=0),
)


DIABETES = Rubric(
    condition=Condition.DIABETES,
    label="Type 2 diabetes",
    baseline=0,
    missing_penalty=4,
    volatility=4,
    drivers=(
        # Glycemic control; average glucose stands in when HbA1c is absent
        continuous(
            "hba1c",
            band(4.8, 5.4, 0, 5),
            band(5.4, 5.9, 5, 15),
            band(5.9, 6.5, 15, 35),
            band(6.5, 9.5, 35, 60),
            missing_penalty=15,
            fallback=continuous(
                "avgGlucoseMgDl",
                band(85, 125, 5, 40),
                band(125, 200, 40, 60),
            ),
        ),
        continuous(
            "bmi",
            band(18.5, 23, 0, 5),
            band(23, 27, 5, 12),
            band(27, 32, 12, 22),
            band(32, 45, 22, 30),
            missing_penalty=8,
        ),
        inverse("stepsDaily", band(0, 12000, 0, 15), missing_penalty=6),
        continuous("sleepEfficiency", band(70, 95, 8, 0), missing_penalty=3),
        discrete(
            "sleepDurationHours",
            Bucket(points=0, span=(7, 9)),
            Bucket(points=3, span=(6, 7)),
            Bucket(points=2, span=(9, 10)),
            Bucket(points=6, span=(0, 6)),
            Bucket(points=6, span=(10, 24)),
            otherwise=6,
            missing_penalty=2,
        ),
        discrete(
            "familyHistoryDiabetes",
            Bucket(points=15, value="multiple"),
            Bucket(points=10, value="close"),
            Bucket(points=6, value="distant"),
            Bucket(points=0, value="none"),
            missing_penalty=5,
        ),
        protective("vo2max", band(25, 50, 8, -5), missing_penalty=OPTIONAL),
    ),
)

HYPERTENSION = Rubric(
    condition=Condition.HYPERTENSION,
    label="Hypertension",
    baseline=0,
    missing_penalty=6,
    volatility=5,
    drivers=(
        category(
            "bloodPressure",
            ("bpSystolic", "bpDiastolic"),
            categories=BP_CATEGORIES,
            extras=_bp_extras(),
            missing_penalty=20,
        ),
        continuous("sodiumIntakeMg", band(1500, 3500, 0, 12), missing_penalty=4),
        continuous("bmi", band(23, 35, 0, 12)),
        continuous("alcoholUnitsWeekly", band(0, 20, 0, 8), missing_penalty=OPTIONAL),
        inverse("stepsDaily", band(0, 12000, 0, 8), missing_penalty=OPTIONAL),
        continuous("restingHR", band(55, 85, 0, 8), missing_penalty=OPTIONAL),
    ),
)

HEART_DISEASE = Rubric(
    condition=Condition.HEART_DISEASE,
    label="Coronary heart disease",
    baseline=5,
    missing_penalty=6,
    volatility=5,
    drivers=(
        continuous(
            "ldl",
            band(70, 100, 0, 10),
            band(100, 160, 10, 25),
            band(160, 220, 25, 35),
            missing_penalty=10,
        ),
        protective("hdl", band(40, 60, 10, 0), band(60, 80, 0, -5)),
        continuous("triglycerides", band(100, 200, 2, 10), band(200, 400, 10, 18)),
        category(
            "bloodPressure",
            ("bpSystolic", "bpDiastolic"),
            extras=_bp_extras(),
            missing_penalty=10,
        ),
        continuous("age", band(35, 80, 5, 15), missing_penalty=OPTIONAL),
        discrete(
            "smoker",
            Bucket(points=15, value=True),
            Bucket(points=0, value=False),
            missing_penalty=OPTIONAL,
        ),
        discrete(
            "hasDiabetes",
            Bucket(points=10, value=True),
            Bucket(points=0, value=False),
            missing_penalty=OPTIONAL,
        ),
        inverse("stepsDaily", band(0, 12000, 0, 10), missing_penalty=OPTIONAL),
    ),
)

ASTHMA = Rubric(
    condition=Condition.ASTHMA,
    label="Asthma",
    baseline=0,
    missing_penalty=5,
    volatility=4,
    drivers=(
        # Lower SpO2 means higher risk
        continuous("spo2", band(92, 98, 18, 0), missing_penalty=8),
        continuous("respRate", band(12, 24, 0, 12), missing_penalty=6),
        inverse("stepsDaily", band(0, 12000, 0, 8), missing_penalty=OPTIONAL),
        continuous("sleepEfficiency", band(70, 95, 10, 0), missing_penalty=OPTIONAL),
    ),
)

ARTHRITIS = Rubric(
    condition=Condition.ARTHRITIS,
    label="Osteoarthritis",
    baseline=0,
    missing_penalty=6,
    volatility=3,
    drivers=(
        continuous("bmi", band(23, 40, 0, 30), missing_penalty=10),
        inverse("stepsDaily", band(0, 15000, 0, 20), missing_penalty=8),
        continuous("jointPainScore", band(0, 10, 0, 25), missing_penalty=OPTIONAL),
        continuous("age", band(35, 80, 2, 10), missing_penalty=OPTIONAL),
    ),
)

PARKINSONS = Rubric(
    condition=Condition.PARKINSONS,
    label="Parkinson's disease",
    baseline=0,
    missing_penalty=6,
    volatility=4,
    drivers=(
        # Wearable proxies: lower gait stability means higher risk
        continuous("gaitStabilityScore", band(60, 90, 35, 0), missing_penalty=12),
        continuous("tremorEpisodesWeekly", band(0, 50, 0, 35), missing_penalty=10),
        continuous("sleepEfficiency", band(70, 95, 10, 0), missing_penalty=OPTIONAL),
        inverse("stepsDaily", band(0, 12000, 0, 8), missing_penalty=OPTIONAL),
    ),
)


RUBRICS: MappingProxyType[Condition, Rubric] = MappingProxyType(
    {
        rubric.condition: rubric
        for rubric in (DIABETES, HYPERTENSION, HEART_DISEASE, ASTHMA, ARTHRITIS, PARKINSONS)
    }
)


def resolve_condition(condition: object) -> Condition | None:
    """Case-insensitive lookup of a condition identifier; None if unknown."""
    if not isinstance(condition, str):
        return None
    try:
        return Condition(condition.lower())
    except ValueError:
        return None


def get_rubric(condition: object) -> Rubric | None:
    resolved = resolve_condition(condition)
    return RUBRICS[resolved] if resolved is not None else None
