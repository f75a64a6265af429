"""Pydantic models for the disease risk scoring domain."""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

# --- Enums ---


class Condition(StrEnum):
    DIABETES = "diabetes"
    HYPERTENSION = "hypertension"
    HEART_DISEASE = "heart-disease"
    ASTHMA = "asthma"
    ARTHRITIS = "arthritis"
    PARKINSONS = "parkinsons"


class DriverKind(StrEnum):
    CONTINUOUS = "continuous"
    INVERSE = "inverse"
    PROTECTIVE = "protective"
    DISCRETE = "discrete"
    CATEGORY = "category"


class ContributionStatus(StrEnum):
    EVALUATED = "evaluated"
    FALLBACK = "fallback"
    MISSING = "missing"


class RiskLevel(StrEnum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


# --- Scoring Output Models ---


class DriverContribution(BaseModel):
    driver: str
    keys: list[str]
    kind: DriverKind
    points: float
    status: ContributionStatus = ContributionStatus.EVALUATED
    detail: str = ""


class RiskAssessment(BaseModel):
    condition: str
    recognized: bool = True
    score: int = Field(ge=0, le=100)
    raw_score: float
    risk_level: RiskLevel
    baseline: float = 0.0
    contributions: list[DriverContribution] = Field(default_factory=list)
    missing_metrics: list[str] = Field(default_factory=list)
    trajectory: list[int] = Field(default_factory=list)
    peak_week: int | None = None
    peak_score: int | None = None
    rationale: str = ""
    scoring_version: str = "risk-rubric-v1"
    assessed_at: datetime


# --- Request Models ---


class ScoreRequest(BaseModel):
    metrics: dict[str, Any] = Field(default_factory=dict)
    include_trajectory: bool = True
    seed: int | None = None


class AssessRequest(BaseModel):
    conditions: list[str] = Field(min_length=1)
    # Shared record used for every condition unless a per-condition one is given
    metrics: dict[str, Any] = Field(default_factory=dict)
    metrics_by_condition: dict[str, dict[str, Any]] = Field(default_factory=dict)
    include_trajectory: bool = True
    seed: int | None = None


class TrajectoryRequest(BaseModel):
    base_score: int = Field(ge=0, le=100)
    weeks: int = Field(default=6, ge=1, le=52)
    volatility: int = Field(default=4, ge=0, le=20)
    seed: int | None = None


# --- API Response Models ---


class AssessResponse(BaseModel):
    items: list[RiskAssessment]
    total: int


class TrajectoryResponse(BaseModel):
    trajectory: list[int]
    peak_week: int
    peak_score: int


class ConditionSummary(BaseModel):
    condition: Condition
    label: str
    baseline: float
    missing_penalty: float
    volatility: int
    drivers: list[str]


class DriverSummary(BaseModel):
    name: str
    kind: DriverKind
    keys: list[str]
    missing_penalty: float
    optional: bool
    table: list[dict[str, Any]] = Field(default_factory=list)
    fallback: str | None = None


class RubricDetail(BaseModel):
    condition: Condition
    label: str
    baseline: float
    missing_penalty: float
    volatility: int
    drivers: list[DriverSummary]
