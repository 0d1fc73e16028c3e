"""Top-k candidate extraction for visualization."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from temperature_playground.sampling.types import Candidate

if TYPE_CHECKING:
    from collections.abc import Callable


def select_top_k(
    dist: np.ndarray,
    k: int,
    resolve: Callable[[int], str],
) -> list[Candidate]:
    """Return the *k* most probable entries of *dist*, most probable first.

    Ties are broken by ascending vocabulary index so the ordering is fully
    deterministic. *k* is clamped to the distribution length; ``k <= 0``
    yields an empty list. The input is not modified.

    Args:
        dist: Probability distribution (vocab_size,).
        k: Number of candidates to return.
        resolve: Maps a vocabulary index to its display text. Called once
            per returned candidate.

    Returns:
        List of ``min(k, vocab_size)`` candidates.
    """
    probs = np.asarray(dist)
    vocab_size = probs.size
    k = min(int(k), vocab_size)
    if k <= 0:
        return []

    if k < vocab_size:
        # O(n) threshold, then keep every entry tied with the k-th value so
        # index tie-breaking sees the whole tie group.
        kth_value = np.partition(probs, vocab_size - k)[vocab_size - k]
        pool = np.flatnonzero(probs >= kth_value)
    else:
        pool = np.arange(vocab_size)

    # lexsort sorts by the last key first: descending probability, then index.
    order = pool[np.lexsort((pool, -probs[pool]))][:k]

    return [
        Candidate(
            token_id=int(idx),
            display_text=resolve(int(idx)),
            probability=float(probs[idx]),
        )
        for idx in order
    ]
