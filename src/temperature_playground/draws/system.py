"""System draw source using ``os.urandom()``.

This is the default source. It is cryptographically secure, always
available and cannot be seeded.
"""

from __future__ import annotations

import os

from temperature_playground.draws.base import DrawSource
from temperature_playground.draws.registry import register_draw_source

# 53 random bits map exactly onto the float64 mantissa.
_MANTISSA_BITS = 53
_SCALE = 1.0 / (1 << _MANTISSA_BITS)


@register_draw_source("system")
class SystemDrawSource(DrawSource):
    """``os.urandom()`` wrapper producing uniform floats in [0, 1)."""

    @property
    def name(self) -> str:
        """Return ``'system'``."""
        return "system"

    def draw(self) -> float:
        """Return a float built from 53 bits of OS randomness."""
        bits = int.from_bytes(os.urandom(8), "big") >> (64 - _MANTISSA_BITS)
        return bits * _SCALE
