"""Abstract base class for all uniform draw sources.

A draw source is the ``random_draw`` collaborator of
:func:`~temperature_playground.sampling.chooser.choose_next`: every call to
``draw()`` yields one float in [0, 1). Instances are callable so they can be
passed directly wherever a zero-argument draw function is expected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import numpy as np


class DrawSource(ABC):
    """Abstract base for all draw sources.

    Subclasses must implement ``name``, ``draw()`` and ``close()``.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source identifier (e.g., ``'system'``, ``'seeded'``)."""

    @abstractmethod
    def draw(self) -> float:
        """Return one uniform float in [0, 1)."""

    def draw_many(self, n: int) -> np.ndarray:
        """Return *n* uniform floats in [0, 1).

        The default implementation calls ``draw()`` *n* times. Subclasses
        with a vectorized generator may override.
        """
        return np.fromiter((self.draw() for _ in range(n)), dtype=np.float64, count=n)

    def __call__(self) -> float:
        return self.draw()

    def close(self) -> None:
        """Release resources. No-op by default."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with at least ``'source'`` and ``'healthy'`` keys.
        """
        return {"source": self.name, "healthy": True}
