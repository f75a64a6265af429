"""Disease risk scoring domain."""

from .config import RiskEngineConfig, default_config
from .drivers import Driver, evaluate_driver, scale
from .models import (
    Condition,
    DriverContribution,
    DriverKind,
    RiskAssessment,
    RiskLevel,
)
from .rubrics import RUBRICS, Rubric, get_rubric, resolve_condition
from .scoring import RiskScorer, compute_risk, default_scorer
from .trajectory import find_peak, project_trajectory, sanitize_trajectory

__all__ = [
    "RUBRICS",
    "Condition",
    "Driver",
    "DriverContribution",
    "DriverKind",
    "RiskAssessment",
    "RiskEngineConfig",
    "RiskLevel",
    "RiskScorer",
    "Rubric",
    "compute_risk",
    "default_config",
    "default_scorer",
    "evaluate_driver",
    "find_peak",
    "get_rubric",
    "project_trajectory",
    "resolve_condition",
    "sanitize_trajectory",
    "scale",
]
