#!/usr/bin/env python3
"""Compare temperatures on a tiny character-level bigram model.

The model counts character bigrams in a short corpus and returns
log-counts as scores, so the demo runs anywhere numpy does. Each
temperature's output is printed together with the top candidates of its
first step.

Usage:
    # Default temperatures (0.0, 0.7, 1.5):
    python bigram_demo.py --prompt "the "

    # Custom temperatures, reproducible draws:
    python bigram_demo.py --prompt "a" --temperatures 0.3 1.0 3.0 --seed 7

    # Verbose per-token logging:
    TP_LOG_LEVEL=full python bigram_demo.py --verbose
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

import numpy as np

# Make the src/ layout importable when running from a checkout.
_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_SRC_DIR = os.path.abspath(os.path.join(_SCRIPT_DIR, "..", "src"))
if _SRC_DIR not in sys.path:
    sys.path.insert(0, _SRC_DIR)

from temperature_playground import PlaygroundConfig, TemperatureComparison

logger = logging.getLogger("bigram_demo")

_CORPUS = (
    "the cat sat on the mat. the dog sat on the log. "
    "a cat and a dog met at the gate and then they ate. "
)
_EOS = "."


class CharTokenizer:
    def __init__(self, text: str) -> None:
        self.vocab = sorted(set(text))
        self._index = {ch: i for i, ch in enumerate(self.vocab)}
        self.eos_token_id = self._index[_EOS]

    def encode(self, text: str) -> list[int]:
        return [self._index[ch] for ch in text if ch in self._index]

    def decode(self, token_id: int) -> str:
        return self.vocab[token_id]


class BigramModel:
    """Scores are log(count + 1) of bigrams starting at the last character."""

    def __init__(self, tokenizer: CharTokenizer, text: str) -> None:
        ids = tokenizer.encode(text)
        size = len(tokenizer.vocab)
        counts = np.zeros((size, size), dtype=np.float64)
        for a, b in zip(ids, ids[1:]):
            counts[a, b] += 1
        self._scores = np.log1p(counts)

    def forward(self, sequence: list[int]) -> np.ndarray:
        return self._scores[sequence[-1]]


def main() -> None:
    parser = argparse.ArgumentParser(description="Temperature comparison on a bigram model")
    parser.add_argument("--prompt", default="the ", help="Prompt text (default: 'the ')")
    parser.add_argument("--temperatures", type=float, nargs="+", help="Temperatures to compare")
    parser.add_argument("--max-tokens", type=int, default=40)
    parser.add_argument("--top-k", type=int, default=5)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible draws")
    parser.add_argument("--sequential", action="store_true", help="Run one temperature at a time")
    parser.add_argument("--verbose", action="store_true", help="Show per-token sampling logs")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    overrides: dict[str, object] = {"max_tokens": args.max_tokens, "top_k": args.top_k}
    if args.seed is not None:
        overrides.update(draw_source="seeded", draw_seed=args.seed)
    if args.temperatures:
        overrides["temperatures"] = args.temperatures
    config = PlaygroundConfig(**overrides)

    tokenizer = CharTokenizer(_CORPUS)
    model = BigramModel(tokenizer, _CORPUS)
    prompt_ids = tokenizer.encode(args.prompt)
    if not prompt_ids:
        parser.error("prompt has no characters from the corpus vocabulary")

    comparison = TemperatureComparison(model, tokenizer, config=config)
    outputs = asyncio.run(comparison.run(prompt_ids, concurrent=not args.sequential))

    for output in outputs:
        print(f"T={output.temperature:<4} [{output.state.value}] {args.prompt}{output.content!r}")
        if output.tokens:
            first = output.tokens[0]
            ranked = ", ".join(
                f"{c.display_text!r}:{c.probability:.3f}" for c in first.top_candidates
            )
            print(f"         step 0 candidates: {ranked}")
        if output.error:
            print(f"         error: {output.error}")


if __name__ == "__main__":
    main()
