"""Shared pytest fixtures for temperature-playground tests.

Provides a quiet configuration, a deterministic tokenizer and scripted
Model stubs that are used across multiple test modules.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pytest

from temperature_playground.config import PlaygroundConfig

VOCAB_SIZE = 8
EOS_ID = 7


def one_hot_scores(index: int, vocab_size: int = VOCAB_SIZE) -> np.ndarray:
    """Scores that put all probability mass on *index* at any temperature."""
    scores = np.full(vocab_size, -np.inf)
    scores[index] = 0.0
    return scores


class StubTokenizer:
    """Renders token ``i`` as ``<i>``; EOS is the last vocabulary id."""

    def __init__(self, eos_token_id: int | None = EOS_ID) -> None:
        self.eos_token_id = eos_token_id
        self.decode_calls: list[int] = []

    def decode(self, token_id: int) -> str:
        self.decode_calls.append(token_id)
        return f"<{token_id}>"


class ScriptedModel:
    """Returns pre-set score vectors in order and records every call.

    After the script runs out the last vector is repeated. If
    ``fail_at`` is set, the call with that zero-based index raises.
    """

    def __init__(self, script: list[Any], fail_at: int | None = None) -> None:
        self._script = [np.asarray(s, dtype=np.float64) for s in script]
        self._fail_at = fail_at
        self.calls: list[list[int]] = []

    def forward(self, sequence: list[int]) -> np.ndarray:
        index = len(self.calls)
        self.calls.append(list(sequence))
        if index == self._fail_at:
            raise RuntimeError("model exploded")
        return self._script[min(index, len(self._script) - 1)]


@pytest.fixture()
def quiet_config() -> PlaygroundConfig:
    """Defaults with logging disabled and no .env lookup."""
    return PlaygroundConfig(_env_file=None, log_level="none")  # type: ignore[call-arg]


@pytest.fixture()
def diagnostic_config() -> PlaygroundConfig:
    """Silent logging with every token record kept in memory."""
    return PlaygroundConfig(
        _env_file=None,
        log_level="none",
        diagnostic_mode=True,  # type: ignore[call-arg]
    )


@pytest.fixture()
def tokenizer() -> StubTokenizer:
    return StubTokenizer()


@pytest.fixture()
def worked_example_scores() -> np.ndarray:
    """Scores [2.0, 1.0, 0.1]: softmax at T=1 is about [0.659, 0.242, 0.099]."""
    return np.array([2.0, 1.0, 0.1])


@pytest.fixture()
def random_scores() -> np.ndarray:
    """Random logits for a 32000-entry vocabulary (fixed seed)."""
    rng = np.random.default_rng(seed=12345)
    return rng.standard_normal(32000).astype(np.float64)
