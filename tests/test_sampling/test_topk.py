"""Tests for select_top_k."""

from __future__ import annotations

import numpy as np
import pytest

from temperature_playground.sampling.topk import select_top_k
from temperature_playground.sampling.types import Candidate


def _label(index: int) -> str:
    return f"tok{index}"


class TestSelectTopK:
    """Tests for ranked candidate extraction."""

    def test_descending_order(self) -> None:
        dist = np.array([0.1, 0.4, 0.2, 0.3])
        result = select_top_k(dist, 3, _label)
        assert [c.token_id for c in result] == [1, 3, 2]
        assert [c.display_text for c in result] == ["tok1", "tok3", "tok2"]
        assert [c.probability for c in result] == pytest.approx([0.4, 0.3, 0.2])

    def test_non_increasing_on_random_distribution(self) -> None:
        rng = np.random.default_rng(7)
        dist = rng.dirichlet(np.ones(500))
        result = select_top_k(dist, 25, _label)
        probs = [c.probability for c in result]
        assert len(result) == 25
        assert all(a >= b for a, b in zip(probs, probs[1:]))
        # The 25 chosen are the 25 largest.
        assert min(probs) >= np.sort(dist)[-25]

    def test_ties_broken_by_ascending_index(self) -> None:
        dist = np.array([0.1, 0.2, 0.2, 0.1, 0.2, 0.2])
        result = select_top_k(dist, 3, _label)
        assert [c.token_id for c in result] == [1, 2, 4]

    def test_tie_group_straddling_cutoff(self) -> None:
        """A tie at the k-th position keeps the lowest indices."""
        dist = np.array([0.25, 0.125, 0.125, 0.125, 0.125, 0.25])
        result = select_top_k(dist, 4, _label)
        assert [c.token_id for c in result] == [0, 5, 1, 2]

    def test_k_clamped_to_vocab_size(self) -> None:
        dist = np.array([0.5, 0.3, 0.2])
        result = select_top_k(dist, 10, _label)
        assert len(result) == 3

    @pytest.mark.parametrize("k", [0, -1])
    def test_non_positive_k_returns_empty(self, k: int) -> None:
        assert select_top_k(np.array([0.5, 0.5]), k, _label) == []

    def test_resolver_called_once_per_candidate(self) -> None:
        calls: list[int] = []

        def resolve(index: int) -> str:
            calls.append(index)
            return str(index)

        select_top_k(np.full(100, 0.01), 5, resolve)
        assert calls == [0, 1, 2, 3, 4]

    def test_input_not_modified(self) -> None:
        dist = np.array([0.1, 0.4, 0.2, 0.3])
        before = dist.copy()
        select_top_k(dist, 2, _label)
        np.testing.assert_array_equal(dist, before)

    def test_returns_candidates(self) -> None:
        result = select_top_k(np.array([0.7, 0.3]), 1, _label)
        assert result == [Candidate(token_id=0, display_text="tok0", probability=0.7)]
        assert isinstance(result[0].token_id, int)
        assert isinstance(result[0].probability, float)


class TestCandidateImmutability:
    def test_frozen(self) -> None:
        candidate = Candidate(token_id=1, display_text="a", probability=0.5)
        with pytest.raises(AttributeError):
            candidate.probability = 0.9  # type: ignore[misc]

    def test_slots(self) -> None:
        assert hasattr(Candidate(token_id=1, display_text="a", probability=0.5), "__slots__")
