"""Draw source replaying a fixed list of values, cycling when exhausted."""

from __future__ import annotations

from typing import TYPE_CHECKING

from temperature_playground.draws.base import DrawSource
from temperature_playground.draws.registry import register_draw_source

if TYPE_CHECKING:
    from collections.abc import Iterable


@register_draw_source("replay")
class ReplayDrawSource(DrawSource):
    """Returns the given values in order, starting over after the last one.

    Args:
        values: Draws to replay. Each must lie in [0, 1).

    Raises:
        ValueError: If *values* is empty or holds a value outside [0, 1).
    """

    def __init__(self, values: Iterable[float] = (0.5,)) -> None:
        self._values = tuple(float(v) for v in values)
        if not self._values:
            raise ValueError("ReplayDrawSource needs at least one value")
        bad = [v for v in self._values if not 0.0 <= v < 1.0]
        if bad:
            raise ValueError(f"Replay values must lie in [0, 1), got {bad}")
        self._position = 0

    @property
    def name(self) -> str:
        """Return ``'replay'``."""
        return "replay"

    @property
    def position(self) -> int:
        """Total number of draws taken so far."""
        return self._position

    def draw(self) -> float:
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value
