"""Base generator class with seeded RNG and shared sampling helpers."""

import random
import uuid
from typing import Any

import numpy as np


class BaseGenerator:
    def __init__(self, config: dict[str, Any], seed: int = 42):
        self.config = config
        self.seed = seed
        random.seed(seed)
        np.random.seed(seed)

    def _uuid(self) -> str:
        """Deterministic UUID drawn from the seeded RNG."""
        return str(uuid.UUID(int=random.getrandbits(128), version=4))

    def _weighted_choice(self, options: dict[str, float]) -> str:
        """Choose from weighted options."""
        items = list(options.keys())
        weights = list(options.values())
        return random.choices(items, weights=weights, k=1)[0]

    def _chance(self, rate: float) -> bool:
        return random.random() < rate
