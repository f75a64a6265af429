"""Disease risk scoring engine.

Rubric-driven additive model producing a 0-100 risk score from a partial
metrics record. Each rubric driver contributes points (negative for
protective drivers, a fixed penalty when its metrics are absent); the score
is the rounded sum plus the rubric baseline, clamped to [0, 100].

Scoring is pure and synchronous: no I/O and no shared mutable state, so a
single scorer can serve concurrent callers.
"""

import math
import random
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog

from .config import RiskEngineConfig, default_config
from .drivers import Metrics, evaluate_driver
from .models import (
    Condition,
    ContributionStatus,
    DriverContribution,
    RiskAssessment,
    RiskLevel,
)
from .rubrics import RUBRICS, Rubric, resolve_condition
from .trajectory import find_peak, project_trajectory

logger = structlog.get_logger()


def _to_score(raw: float) -> int:
    # Half-up rounding, then clamp
    return int(max(0, min(100, math.floor(raw + 0.5))))


def _as_metrics(metrics: Any) -> Metrics:
    return metrics if isinstance(metrics, Mapping) else {}


class RiskScorer:
    """Computes condition risk scores, breakdowns and trajectories."""

    def __init__(
        self,
        config: RiskEngineConfig | None = None,
        rubrics: Mapping[Condition, Rubric] | None = None,
    ) -> None:
        self._config = config or default_config
        self._rubrics = rubrics if rubrics is not None else RUBRICS

    def rubric_for(self, condition: object) -> Rubric | None:
        resolved = resolve_condition(condition)
        if resolved is None:
            return None
        return self._rubrics.get(resolved)

    def breakdown(self, rubric: Rubric, metrics: Metrics) -> list[DriverContribution]:
        """Evaluate every rubric driver in listed order."""
        return [
            evaluate_driver(driver, metrics, rubric.missing_penalty)
            for driver in rubric.drivers
        ]

    def compute_risk(self, condition: object, metrics: Any) -> int:
        """Score ``metrics`` for ``condition``.

        Unknown conditions return the configured fallback score (25 by
        default) rather than raising. Absent or malformed metrics fall back
        to each driver's missing-data penalty.
        """
        rubric = self.rubric_for(condition)
        if rubric is None:
            logger.debug("unknown_condition_fallback", condition=str(condition))
            return self._config.unknown_condition_score

        contributions = self.breakdown(rubric, _as_metrics(metrics))
        raw = rubric.baseline + sum(c.points for c in contributions)
        return _to_score(raw)

    def risk_level(self, score: float) -> RiskLevel:
        """Map a score to its risk level band."""
        cfg = self._config.levels
        if score >= cfg.very_high_threshold:
            return RiskLevel.VERY_HIGH
        elif score >= cfg.high_threshold:
            return RiskLevel.HIGH
        elif score >= cfg.moderate_threshold:
            return RiskLevel.MODERATE
        else:
            return RiskLevel.LOW

    def assess(
        self,
        condition: object,
        metrics: Any,
        include_trajectory: bool = True,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> RiskAssessment:
        """Full assessment: score, driver breakdown, rationale and trajectory."""
        cfg = self._config
        metrics = _as_metrics(metrics)
        rubric = self.rubric_for(condition)

        if rubric is None:
            score = cfg.unknown_condition_score
            raw = float(score)
            baseline = 0.0
            contributions: list[DriverContribution] = []
            volatility = cfg.trajectory.default_volatility
            rationale = (
                f"No rubric for condition {str(condition)!r}; "
                f"reporting the default baseline of {score}."
            )
            logger.info("unknown_condition_fallback", condition=str(condition), score=score)
        else:
            contributions = self.breakdown(rubric, metrics)
            baseline = rubric.baseline
            raw = baseline + sum(c.points for c in contributions)
            score = _to_score(raw)
            volatility = rubric.volatility
            rationale = self._rationale(rubric, contributions, score)

        trajectory: list[int] = []
        peak_week = peak_score = None
        if include_trajectory:
            if rng is None:
                rng = random.Random(seed if seed is not None else cfg.trajectory.seed)
            trajectory = project_trajectory(
                score, weeks=cfg.trajectory.weeks, volatility=volatility, rng=rng
            )
            peak_week, peak_score = find_peak(trajectory)

        missing = [
            key
            for c in contributions
            if c.status is ContributionStatus.MISSING
            for key in c.keys
        ]

        assessment = RiskAssessment(
            condition=rubric.condition.value if rubric else str(condition),
            recognized=rubric is not None,
            score=score,
            raw_score=round(raw, 2),
            risk_level=self.risk_level(score),
            baseline=baseline,
            contributions=contributions,
            missing_metrics=missing,
            trajectory=trajectory,
            peak_week=peak_week,
            peak_score=peak_score,
            rationale=rationale,
            scoring_version=cfg.scoring_version,
            assessed_at=datetime.now(UTC),
        )

        logger.info(
            "risk_assessed",
            condition=assessment.condition,
            score=assessment.score,
            risk_level=assessment.risk_level.value,
            missing_count=len(missing),
            recognized=assessment.recognized,
        )

        return assessment

    def assess_many(
        self,
        conditions: Iterable[object],
        metrics: Any = None,
        metrics_by_condition: Mapping[str, Any] | None = None,
        include_trajectory: bool = True,
        seed: int | None = None,
    ) -> list[RiskAssessment]:
        """Assess several conditions for one patient.

        Each condition uses its entry in ``metrics_by_condition`` (matched
        case-insensitively) when present, otherwise the shared ``metrics``.
        One RNG is shared across the batch so a seed reproduces all
        trajectories.
        """
        per_condition = {
            str(k).lower(): v for k, v in (metrics_by_condition or {}).items()
        }
        rng = random.Random(seed if seed is not None else self._config.trajectory.seed)

        items = []
        for condition in conditions:
            key = str(condition).lower()
            record = per_condition.get(key, metrics)
            items.append(
                self.assess(
                    condition,
                    record,
                    include_trajectory=include_trajectory,
                    rng=rng,
                )
            )
        return items

    def _rationale(
        self,
        rubric: Rubric,
        contributions: list[DriverContribution],
        score: int,
    ) -> str:
        """One sentence citing the strongest drivers, plus missing-data note."""
        elevated = [
            c
            for c in contributions
            if c.status is not ContributionStatus.MISSING and c.points > 0
        ]
        top = sorted(elevated, key=lambda c: c.points, reverse=True)
        top = top[: self._config.rationale_top_n]

        if top:
            parts = [f"{c.driver} ({c.detail}, +{c.points:.0f})" for c in top]
            cited = parts[0] if len(parts) == 1 else ", ".join(parts[:-1]) + " and " + parts[-1]
            sentence = f"{rubric.label} risk {score}/100, driven mainly by {cited}."
        else:
            sentence = f"{rubric.label} risk {score}/100 with no elevated drivers."

        penalised = [
            c
            for c in contributions
            if c.status is ContributionStatus.MISSING and c.points > 0
        ]
        if penalised:
            sentence += (
                f" {len(penalised)} driver(s) lacked data and carry a "
                f"missing-data penalty."
            )
        return sentence


default_scorer = RiskScorer()


def compute_risk(condition: object, metrics: Any) -> int:
    """Score ``metrics`` for ``condition`` with the default scorer."""
    return default_scorer.compute_risk(condition, metrics)
