"""Next-token choice: explicit greedy branch or inverse-CDF sampling.

Semantic interpretation of the draw u:
    u near 0.0: selects the lowest vocabulary index with mass
    u near 1.0: selects the highest vocabulary index with mass

The walk runs in vocabulary order, not probability order, so a uniform
draw reproduces the distribution exactly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Callable

GREEDY_THRESHOLD: float = 0.01
"""Temperatures strictly below this bypass sampling and take the arg-max."""


def choose_next(
    dist: np.ndarray,
    temperature: float,
    random_draw: Callable[[], float],
    greedy_threshold: float = GREEDY_THRESHOLD,
) -> int:
    """Choose the next token index from *dist*.

    If ``temperature < greedy_threshold`` the arg-max is returned and
    *random_draw* is never called. Otherwise one value u in [0, 1) is drawn
    and the first index whose cumulative probability exceeds u is returned.
    When rounding leaves the total just below u, the last index is returned.

    Args:
        dist: Probability distribution (vocab_size,).
        temperature: Temperature the distribution was built with.
        random_draw: Zero-argument callable returning a uniform float in [0, 1).
        greedy_threshold: Greedy decoding cutoff.

    Returns:
        Vocabulary index in ``[0, vocab_size)``.
    """
    probs = np.asarray(dist)
    if temperature < greedy_threshold:
        # np.argmax returns the lowest index among ties.
        return int(np.argmax(probs))

    u = float(random_draw())
    cdf = np.cumsum(probs)
    # side="right": first index with cdf[i] > u.
    idx = int(np.searchsorted(cdf, u, side="right"))
    return min(idx, probs.size - 1)
