"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenSamplingRecord:
    """Immutable record of a single decode step.

    Attributes:
        timestamp_ns: Wall-clock time the step started (ns since epoch).
        step: Zero-based index of the generated token within its session.
        token_id: Vocabulary index of the chosen token.
        token_rank: Position of the chosen token in the top-k list, or -1
            when it fell outside the reported candidates.
        token_prob: Probability of the chosen token.
        temperature: Temperature requested for the session (before flooring).
        greedy: True if the arg-max branch was taken.
        shannon_entropy: Shannon entropy of the distribution (nats).
        vocab_size: Length of the score vector.
        model_ms: Time spent in the Model call (milliseconds).
        total_step_ms: Time for the whole step, excluding consumer delivery.
    """

    timestamp_ns: int
    step: int

    # Selection
    token_id: int
    token_rank: int
    token_prob: float

    # Temperature
    temperature: float
    greedy: bool
    shannon_entropy: float
    vocab_size: int

    # Timing
    model_ms: float
    total_step_ms: float
