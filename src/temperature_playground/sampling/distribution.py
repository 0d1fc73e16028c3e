"""Temperature-scaled softmax over raw model scores.

The temperature is floored at ``TEMPERATURE_FLOOR`` rather than rejected, so
callers may pass 0 or negative values. As the temperature approaches the
floor the result approaches one-hot on the arg-max but never reaches it;
true greedy decoding is handled explicitly by
:func:`~temperature_playground.sampling.chooser.choose_next`.
"""

from __future__ import annotations

from typing import Any

import numpy as np

TEMPERATURE_FLOOR: float = 1e-3
"""Smallest temperature used to scale scores."""


def build_distribution(
    scores: Any,
    temperature: float,
    floor: float = TEMPERATURE_FLOOR,
) -> np.ndarray:
    """Convert a score vector into a probability distribution.

    Pipeline:
        1. Clamp temperature to ``floor``.
        2. Scale: scores / T.
        3. Shift by the maximum finite scaled score.
        4. Exponentiate and normalize.

    ``-inf`` scores are treated as masked entries and receive probability 0.
    If every entry is masked the distribution is uniform.

    Args:
        scores: 1-D score vector (vocab_size,). Any array-like is accepted.
        temperature: Sampling temperature. Values below ``floor`` are clamped.
        floor: Temperature floor.

    Returns:
        Read-only float64 array of the same length, summing to 1.0.

    Raises:
        ValueError: If *scores* is empty, not 1-D, or contains NaN or +inf.
    """
    logits = np.asarray(scores, dtype=np.float64)
    if logits.ndim != 1 or logits.size == 0:
        raise ValueError(f"scores must be a non-empty 1-D vector, got shape {logits.shape}")
    if np.isnan(logits).any() or np.isposinf(logits).any():
        raise ValueError("scores must not contain NaN or +inf")

    scaled = logits / max(float(temperature), floor)

    finite_mask = np.isfinite(scaled)
    if not finite_mask.any():
        probs = np.full(scaled.size, 1.0 / scaled.size)
    else:
        # -inf - max is still -inf and exp(-inf) = 0.
        exp_shifted = np.exp(scaled - np.max(scaled[finite_mask]))
        probs = exp_shifted / np.sum(exp_shifted)

    probs.flags.writeable = False
    return probs


def distribution_entropy(dist: np.ndarray) -> float:
    """Shannon entropy H = -sum(p_i * ln(p_i)) of a distribution, in nats.

    Zero-probability entries are skipped. Returns 0.0 for one-hot inputs.
    """
    probs = np.asarray(dist, dtype=np.float64)
    mask = probs > 0
    entropy = -float(np.sum(probs[mask] * np.log(probs[mask])))
    # Guard against floating-point artifacts producing tiny negatives.
    return max(0.0, entropy)
