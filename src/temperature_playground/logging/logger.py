"""Diagnostic logger for per-token sampling events.

Uses the standard ``logging`` module with the ``"temperature_playground"``
logger. No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from temperature_playground.config import PlaygroundConfig
    from temperature_playground.logging.types import TokenSamplingRecord

logger = logging.getLogger("temperature_playground")


class SamplingLogger:
    """Per-token diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per token with key metrics (step, token_id,
        rank, probability, temperature, entropy).

        ``"full"``: Full JSON dump of all record fields.

    Diagnostic mode stores all records in memory for post-hoc analysis via
    ``get_diagnostic_data()`` and ``get_summary_stats()``.
    """

    def __init__(self, config: PlaygroundConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[TokenSamplingRecord] = []

    def log_token(self, record: TokenSamplingRecord) -> None:
        """Log a single decode step.

        Args:
            record: Immutable record of the step.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "step=%d token=%d rank=%d prob=%.4f temp=%.3f%s entropy=%.3f "
                "model=%.2fms total=%.2fms",
                record.step,
                record.token_id,
                record.token_rank,
                record.token_prob,
                record.temperature,
                " [GREEDY]" if record.greedy else "",
                record.shannon_entropy,
                record.model_ms,
                record.total_step_ms,
            )
        elif self._log_level == "full":
            logger.info("sampling_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[TokenSamplingRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        probs = [r.token_prob for r in self._records]
        entropies = [r.shannon_entropy for r in self._records]
        model_times = [r.model_ms for r in self._records]
        total_times = [r.total_step_ms for r in self._records]
        greedy_count = sum(1 for r in self._records if r.greedy)
        outside_top_k = sum(1 for r in self._records if r.token_rank < 0)

        n = len(self._records)
        return {
            "total_tokens": n,
            "mean_prob": sum(probs) / n,
            "min_prob": min(probs),
            "mean_entropy": sum(entropies) / n,
            "mean_model_ms": sum(model_times) / n,
            "mean_total_ms": sum(total_times) / n,
            "max_total_ms": max(total_times),
            "greedy_count": greedy_count,
            "outside_top_k_count": outside_top_k,
        }
