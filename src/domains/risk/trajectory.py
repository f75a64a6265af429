"""Weekly risk trajectory projection.

A trajectory starts at the current score (week 0) and drifts by a bounded
integer step each week, clamped to [0, 100] after every step. The steps
are not a forecast: they illustrate how far the score could plausibly move
at the condition's volatility.
"""

import math
import random
from collections.abc import Sequence
from typing import Any


def _clamp_score(value: float) -> int:
    return int(max(0, min(100, math.floor(value + 0.5))))


def project_trajectory(
    base_score: float,
    weeks: int = 6,
    volatility: int = 4,
    seed: int | None = None,
    rng: random.Random | None = None,
) -> list[int]:
    """Project ``weeks`` weekly scores starting from ``base_score``.

    Args:
        base_score: Week-0 score. Rounded and clamped to [0, 100].
        weeks: Total length of the returned sequence, week 0 included.
        volatility: Maximum absolute change per week.
        seed: Seed for a private RNG, for reproducible projections.
        rng: Explicit RNG; takes precedence over ``seed``.

    Raises:
        ValueError: If weeks < 1 or volatility < 0.
    """
    if weeks < 1:
        raise ValueError(f"weeks must be >= 1, got {weeks}")
    if volatility < 0:
        raise ValueError(f"volatility must be >= 0, got {volatility}")

    rng = rng or random.Random(seed)
    trajectory = [_clamp_score(base_score)]
    for _ in range(weeks - 1):
        step = rng.randint(-volatility, volatility)
        trajectory.append(_clamp_score(trajectory[-1] + step))
    return trajectory


def find_peak(trajectory: Sequence[int]) -> tuple[int, int]:
    """Return (week index, score) of the first highest point."""
    if not trajectory:
        raise ValueError("Cannot find the peak of an empty trajectory")
    peak_week = max(range(len(trajectory)), key=lambda i: (trajectory[i], -i))
    return peak_week, trajectory[peak_week]


def _coerce(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def sanitize_trajectory(score: Any, values: Any, weeks: int = 6) -> list[int]:
    """Normalise a trajectory produced outside the engine.

    Externally generated trajectories (e.g. from a language model) are
    best-effort. Non-numeric entries become 0, every entry is rounded and
    clamped, week 0 is forced to the clamped score and the sequence is cut
    or padded with its last value to exactly ``weeks`` entries.
    """
    if weeks < 1:
        raise ValueError(f"weeks must be >= 1, got {weeks}")

    week0 = _clamp_score(_coerce(score))
    raw = list(values) if isinstance(values, (list, tuple)) else []
    cleaned = [week0] + [_clamp_score(_coerce(v)) for v in raw[1:weeks]]
    while len(cleaned) < weeks:
        cleaned.append(cleaned[-1])
    return cleaned
