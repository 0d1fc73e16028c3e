"""Seedable draw source backed by numpy's PCG64 generator.

Used for reproducible demos and tests: two sources with the same seed
yield the same draw sequence.
"""

from __future__ import annotations

import numpy as np

from temperature_playground.draws.base import DrawSource
from temperature_playground.draws.registry import register_draw_source


@register_draw_source("seeded")
class SeededDrawSource(DrawSource):
    """``numpy.random.default_rng(seed)`` wrapper.

    Args:
        seed: Optional RNG seed. ``None`` seeds from fresh OS entropy.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def name(self) -> str:
        """Return ``'seeded'``."""
        return "seeded"

    @property
    def seed(self) -> int | None:
        return self._seed

    def draw(self) -> float:
        return float(self._rng.random())

    def draw_many(self, n: int) -> np.ndarray:
        return self._rng.random(n)

    def health_check(self) -> dict[str, object]:
        return {"source": self.name, "healthy": True, "seed": self._seed}
