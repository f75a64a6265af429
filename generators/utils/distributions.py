"""Statistical distribution helpers for realistic metric generation."""

import numpy as np


def clipped_normal(
    mean: float, std: float, min_val: float, max_val: float, decimals: int | None = 1
) -> float | int:
    """Normal sample clipped to [min_val, max_val].

    ``decimals=None`` returns an int, matching how devices report counts.
    """
    value = float(np.clip(np.random.normal(mean, std), min_val, max_val))
    if decimals is None:
        return int(round(value))
    return round(value, decimals)


def bernoulli(p: float) -> bool:
    return bool(np.random.random() < p)
