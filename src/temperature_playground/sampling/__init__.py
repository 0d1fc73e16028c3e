"""Token sampling subsystem for temperature-playground.

Pure functions turning raw model scores into a probability distribution,
ranked top-k candidates and a chosen next token.
"""

from temperature_playground.sampling.chooser import GREEDY_THRESHOLD, choose_next
from temperature_playground.sampling.distribution import (
    TEMPERATURE_FLOOR,
    build_distribution,
    distribution_entropy,
)
from temperature_playground.sampling.topk import select_top_k
from temperature_playground.sampling.types import Candidate, GeneratedToken

__all__ = [
    "GREEDY_THRESHOLD",
    "TEMPERATURE_FLOOR",
    "Candidate",
    "GeneratedToken",
    "build_distribution",
    "choose_next",
    "distribution_entropy",
    "select_top_k",
]
