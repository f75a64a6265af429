"""Disease risk scoring API endpoints."""

import structlog
from fastapi import APIRouter, HTTPException

from src.domains.risk.drivers import Driver
from src.domains.risk.models import (
    AssessRequest,
    AssessResponse,
    ConditionSummary,
    DriverSummary,
    RiskAssessment,
    RubricDetail,
    ScoreRequest,
    TrajectoryRequest,
    TrajectoryResponse,
)
from src.domains.risk.rubrics import RUBRICS, Rubric, get_rubric
from src.domains.risk.scoring import RiskScorer
from src.domains.risk.trajectory import find_peak, project_trajectory

logger = structlog.get_logger()
router = APIRouter(prefix="/api/v1/risk", tags=["risk"])

_scorer = RiskScorer()


def _driver_summary(driver: Driver, rubric: Rubric) -> DriverSummary:
    return DriverSummary(
        name=driver.name,
        kind=driver.kind,
        keys=list(driver.keys),
        missing_penalty=driver.penalty(rubric.missing_penalty),
        optional=driver.optional,
        table=driver.table(),
        fallback=driver.fallback.name if driver.fallback else None,
    )


@router.get("/conditions")
async def list_conditions() -> list[ConditionSummary]:
    """List the supported conditions and their rubric headlines."""
    return [
        ConditionSummary(
            condition=rubric.condition,
            label=rubric.label,
            baseline=rubric.baseline,
            missing_penalty=rubric.missing_penalty,
            volatility=rubric.volatility,
            drivers=[d.name for d in rubric.drivers],
        )
        for rubric in RUBRICS.values()
    ]


@router.get("/conditions/{condition}/rubric")
async def get_condition_rubric(condition: str) -> RubricDetail:
    """Return the full driver table for one condition."""
    rubric = get_rubric(condition)
    if rubric is None:
        raise HTTPException(status_code=404, detail=f"Unknown condition: {condition}")
    return RubricDetail(
        condition=rubric.condition,
        label=rubric.label,
        baseline=rubric.baseline,
        missing_penalty=rubric.missing_penalty,
        volatility=rubric.volatility,
        drivers=[_driver_summary(d, rubric) for d in rubric.drivers],
    )


@router.post("/assess")
async def assess_conditions(request: AssessRequest) -> AssessResponse:
    """Assess several conditions for one patient in a single call."""
    items = _scorer.assess_many(
        request.conditions,
        metrics=request.metrics,
        metrics_by_condition=request.metrics_by_condition,
        include_trajectory=request.include_trajectory,
        seed=request.seed,
    )
    logger.info(
        "risk_batch_assessed",
        conditions=[item.condition for item in items],
        scores=[item.score for item in items],
    )
    return AssessResponse(items=items, total=len(items))


@router.post("/trajectory")
async def trajectory(request: TrajectoryRequest) -> TrajectoryResponse:
    """Project a weekly trajectory from a base score."""
    weeks = project_trajectory(
        request.base_score,
        weeks=request.weeks,
        volatility=request.volatility,
        seed=request.seed,
    )
    peak_week, peak_score = find_peak(weeks)
    return TrajectoryResponse(trajectory=weeks, peak_week=peak_week, peak_score=peak_score)


@router.post("/{condition}/score")
async def score_condition(
    condition: str,
    request: ScoreRequest | None = None,
) -> RiskAssessment:
    """Score one condition. Unknown conditions return the default baseline."""
    request = request or ScoreRequest()
    return _scorer.assess(
        condition,
        request.metrics,
        include_trajectory=request.include_trajectory,
        seed=request.seed,
    )
