"""Risk engine configuration with sensible defaults.

The rubric tables themselves are fixed data (see rubrics.py). This config
covers the policy knobs around them: the unknown-condition fallback score,
trajectory defaults, risk level banding and rationale length.
"""

import os
from dataclasses import dataclass, field


@dataclass
class RiskLevelConfig:
    """Score thresholds for risk level banding.

    A score at or above a threshold belongs to that level:
    low < moderate <= score < high <= score < very_high.
    """

    moderate_threshold: int = 30
    high_threshold: int = 60
    very_high_threshold: int = 80


@dataclass
class TrajectoryConfig:
    """Defaults for weekly risk projection."""

    weeks: int = 6
    # Used when a rubric does not set its own volatility
    default_volatility: int = 4
    # Fixed seed makes every projection reproducible; None draws fresh entropy
    seed: int | None = None


@dataclass
class RiskEngineConfig:
    """Top-level risk engine configuration.

    Validation is performed at construction time and again after
    environment overrides.
    """

    levels: RiskLevelConfig = field(default_factory=RiskLevelConfig)
    trajectory: TrajectoryConfig = field(default_factory=TrajectoryConfig)

    # Documented default for unrecognised conditions, not a real assessment
    unknown_condition_score: int = 25

    # Number of strongest drivers cited in the rationale sentence
    rationale_top_n: int = 2

    scoring_version: str = "risk-rubric-v1"

    def __post_init__(self) -> None:
        lv = self.levels
        if not (
            0 < lv.moderate_threshold < lv.high_threshold < lv.very_high_threshold <= 100
        ):
            raise ValueError(
                "Risk level thresholds must be ascending within (0, 100], got "
                f"moderate={lv.moderate_threshold}, high={lv.high_threshold}, "
                f"very_high={lv.very_high_threshold}"
            )
        if not 0 <= self.unknown_condition_score <= 100:
            raise ValueError(
                f"unknown_condition_score must be within [0, 100], "
                f"got {self.unknown_condition_score}"
            )
        if self.trajectory.weeks < 1:
            raise ValueError(f"Trajectory weeks must be >= 1, got {self.trajectory.weeks}")
        if self.trajectory.default_volatility < 0:
            raise ValueError(
                f"Trajectory volatility must be >= 0, "
                f"got {self.trajectory.default_volatility}"
            )
        if self.rationale_top_n < 1:
            raise ValueError(f"rationale_top_n must be >= 1, got {self.rationale_top_n}")

    @classmethod
    def from_env(cls) -> "RiskEngineConfig":
        """Load config with environment variable overrides (RISK_ prefix)."""
        config = cls()

        if v := os.getenv("RISK_UNKNOWN_CONDITION_SCORE"):
            config.unknown_condition_score = int(v)
        if v := os.getenv("RISK_MODERATE_THRESHOLD"):
            config.levels.moderate_threshold = int(v)
        if v := os.getenv("RISK_HIGH_THRESHOLD"):
            config.levels.high_threshold = int(v)
        if v := os.getenv("RISK_VERY_HIGH_THRESHOLD"):
            config.levels.very_high_threshold = int(v)
        if v := os.getenv("RISK_TRAJECTORY_WEEKS"):
            config.trajectory.weeks = int(v)
        if v := os.getenv("RISK_TRAJECTORY_VOLATILITY"):
            config.trajectory.default_volatility = int(v)
        if v := os.getenv("RISK_TRAJECTORY_SEED"):
            config.trajectory.seed = int(v)
        if v := os.getenv("RISK_RATIONALE_TOP_N"):
            config.rationale_top_n = int(v)
        if v := os.getenv("RISK_SCORING_VERSION"):
            config.scoring_version = v

        # Re-validate after overrides
        config.__post_init__()
        return config


default_config = RiskEngineConfig()
