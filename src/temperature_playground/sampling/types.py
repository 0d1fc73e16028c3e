"""Data types for the token sampling subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Candidate:
    """One entry of the ranked top-k list shown for a decode step.

    Attributes:
        token_id: Vocabulary index.
        display_text: Tokenizer rendering of ``token_id``.
        probability: Probability of this entry, in [0, 1].
    """

    token_id: int
    display_text: str
    probability: float


@dataclass(frozen=True, slots=True)
class GeneratedToken:
    """A token produced by one decode step, with its sampling context.

    Attributes:
        token_id: Vocabulary index of the chosen token.
        display_text: Tokenizer rendering of ``token_id``.
        selected_probability: Probability the chosen token had at this step.
        top_candidates: The top-k candidates, most probable first.
    """

    token_id: int
    display_text: str
    selected_probability: float
    top_candidates: tuple[Candidate, ...]
