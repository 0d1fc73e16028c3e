"""Autoregressive decode loop: the orchestration layer for temperature-playground.

Drives the per-token pipeline until a stop condition:
    cancel check → model.forward → distribution → top-k → choose → deliver → append.

Each session moves IDLE → RUNNING → {COMPLETED, CANCELLED, FAILED} and never
leaves a terminal state. Cancellation is cooperative and silent: it is
polled before every Model call, again after it, and after each token is
delivered. A cancelled session gets neither a completion nor an error
notification, even when the cancelled step produced its last token.
"""

from __future__ import annotations

import asyncio
import enum
import logging
import time
from typing import TYPE_CHECKING, Any

from temperature_playground.config import PlaygroundConfig, resolve_config
from temperature_playground.decode.cancellation import CancellationToken
from temperature_playground.decode.collaborators import CollectingConsumer, maybe_await
from temperature_playground.draws.registry import DrawSourceRegistry
from temperature_playground.exceptions import DecodeError, SessionStateError
from temperature_playground.logging.logger import SamplingLogger
from temperature_playground.logging.types import TokenSamplingRecord
from temperature_playground.sampling.chooser import GREEDY_THRESHOLD, choose_next
from temperature_playground.sampling.distribution import (
    TEMPERATURE_FLOOR,
    build_distribution,
    distribution_entropy,
)
from temperature_playground.sampling.topk import select_top_k
from temperature_playground.sampling.types import GeneratedToken

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from temperature_playground.decode.collaborators import Model, TokenConsumer, Tokenizer

logger = logging.getLogger("temperature_playground")


class SessionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATES


_TERMINAL_STATES = frozenset({SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED})


class DecodeSession:
    """State of one generation request.

    The session owns its token sequence: prompt ids followed by generated
    ids. Only the :class:`DecodeLoop` running it appends to the sequence,
    one id per successful step; nothing is ever removed, including on
    failure.

    Attributes:
        sequence: Prompt ids followed by generated ids.
        prompt_length: Number of prompt ids at the start of ``sequence``.
        temperature: Requested temperature. Negative values are stored as 0.
        max_tokens: Generation budget.
        top_k: Number of candidates reported per step.
        temperature_floor: Floor applied when scaling scores.
        greedy_threshold: Temperatures below this take the arg-max.
        cancel_token: Handle the requester flips to stop the session.
        state: Current lifecycle state.
        tokens: Tokens emitted so far, in generation order.
        error: The failure, once the session is FAILED.
    """

    __slots__ = (
        "cancel_token",
        "error",
        "greedy_threshold",
        "max_tokens",
        "prompt_length",
        "sequence",
        "state",
        "temperature",
        "temperature_floor",
        "tokens",
        "top_k",
    )

    def __init__(
        self,
        prompt_ids: Iterable[int],
        temperature: float,
        max_tokens: int,
        top_k: int,
        cancel_token: CancellationToken | None = None,
        temperature_floor: float | None = None,
        greedy_threshold: float | None = None,
    ) -> None:
        self.sequence: list[int] = [int(t) for t in prompt_ids]
        self.prompt_length = len(self.sequence)
        self.temperature = max(0.0, float(temperature))
        self.max_tokens = int(max_tokens)
        self.top_k = int(top_k)
        self.temperature_floor = (
            TEMPERATURE_FLOOR if temperature_floor is None else temperature_floor
        )
        self.greedy_threshold = GREEDY_THRESHOLD if greedy_threshold is None else greedy_threshold
        self.cancel_token = cancel_token if cancel_token is not None else CancellationToken()
        self.state = SessionState.IDLE
        self.tokens: list[GeneratedToken] = []
        self.error: DecodeError | None = None

    @property
    def generated_ids(self) -> list[int]:
        return self.sequence[self.prompt_length :]

    @property
    def text(self) -> str:
        return "".join(t.display_text for t in self.tokens)

    def cancel(self) -> None:
        """Shortcut for ``session.cancel_token.cancel()``."""
        self.cancel_token.cancel()

    def __repr__(self) -> str:
        return (
            f"DecodeSession(state={self.state.value}, temperature={self.temperature}, "
            f"generated={len(self.tokens)}/{self.max_tokens})"
        )


class DecodeLoop:
    """Runs decode sessions against one Model/Tokenizer pair.

    The loop holds no per-session state; each :class:`DecodeSession` carries
    its own. One loop may run several sessions one after another. Sessions
    run concurrently should use separate loops so they do not share a draw
    source (see :mod:`temperature_playground.decode.compare`).

    Args:
        model: Score producer, see :class:`~.collaborators.Model`.
        tokenizer: Display text and EOS id, see :class:`~.collaborators.Tokenizer`.
        config: Defaults for new sessions. Loaded from the environment when
            ``None``.
        draw_source: Zero-argument callable returning uniform floats in
            [0, 1). Built from ``config.draw_source`` when ``None``.
        sampling_logger: Per-token diagnostic logger. Built from *config*
            when ``None``.
    """

    def __init__(
        self,
        model: Model,
        tokenizer: Tokenizer,
        config: PlaygroundConfig | None = None,
        draw_source: Callable[[], float] | None = None,
        sampling_logger: SamplingLogger | None = None,
    ) -> None:
        self._model = model
        self._tokenizer = tokenizer
        self._config = config if config is not None else PlaygroundConfig()
        self._draw = (
            draw_source if draw_source is not None else DrawSourceRegistry.build(self._config)
        )
        self._logger = (
            sampling_logger if sampling_logger is not None else SamplingLogger(self._config)
        )

    @property
    def config(self) -> PlaygroundConfig:
        return self._config

    @property
    def sampling_logger(self) -> SamplingLogger:
        return self._logger

    def new_session(
        self,
        prompt_ids: Iterable[int],
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
        top_k: int | None = None,
        cancel_token: CancellationToken | None = None,
        extra_args: dict[str, Any] | None = None,
    ) -> DecodeSession:
        """Create an IDLE session, filling unset parameters from the config.

        Args:
            prompt_ids: Tokenized prompt.
            temperature: Overrides ``config.temperature``.
            max_tokens: Overrides ``config.max_tokens``.
            top_k: Overrides ``config.top_k``.
            cancel_token: Shared handle; a fresh one is created when ``None``.
            extra_args: ``tp_``-prefixed per-request config overrides.

        Raises:
            ConfigValidationError: If *extra_args* is invalid.
        """
        config = resolve_config(self._config, extra_args)
        return DecodeSession(
            prompt_ids,
            temperature=config.temperature if temperature is None else temperature,
            max_tokens=config.max_tokens if max_tokens is None else max_tokens,
            top_k=config.top_k if top_k is None else top_k,
            cancel_token=cancel_token,
            temperature_floor=config.temperature_floor,
            greedy_threshold=config.greedy_threshold,
        )

    async def generate(
        self,
        prompt_ids: Iterable[int],
        consumer: TokenConsumer | None = None,
        **session_kwargs: Any,
    ) -> DecodeSession:
        """Create a session and run it to a terminal state.

        Returns:
            The finished session.
        """
        session = self.new_session(prompt_ids, **session_kwargs)
        await self.run(session, consumer)
        return session

    async def run(
        self, session: DecodeSession, consumer: TokenConsumer | None = None
    ) -> SessionState:
        """Drive *session* until it completes, is cancelled or fails.

        Failures of the Model, the Tokenizer, the draw source or the
        consumer are not raised: they end the session as FAILED and are
        reported once through ``consumer.on_error`` with a
        :class:`DecodeError` whose ``__cause__`` is the original exception.

        Args:
            session: An IDLE session.
            consumer: Receives tokens and the terminal signal. A
                :class:`CollectingConsumer` is used when ``None``.

        Returns:
            The terminal state of the session.

        Raises:
            SessionStateError: If the session is not IDLE.
        """
        if session.state is not SessionState.IDLE:
            raise SessionStateError(
                f"Session is {session.state.value}; only idle sessions can be run"
            )
        if consumer is None:
            consumer = CollectingConsumer()

        session.state = SessionState.RUNNING
        logger.info(
            "Decode session started: prompt_len=%d temperature=%.3f max_tokens=%d top_k=%d",
            session.prompt_length,
            session.temperature,
            session.max_tokens,
            session.top_k,
        )

        try:
            if session.max_tokens <= 0:
                await self._complete(session, consumer)
                return session.state

            while True:
                if session.cancel_token.cancelled:
                    self._mark_cancelled(session)
                    return session.state

                token = await self._step(session)
                if token is None:
                    self._mark_cancelled(session)
                    return session.state

                await maybe_await(consumer.on_token(token))
                session.sequence.append(token.token_id)
                session.tokens.append(token)

                if session.cancel_token.cancelled:
                    self._mark_cancelled(session)
                    return session.state
                if (
                    token.token_id == self._eos_token_id
                    or len(session.tokens) >= session.max_tokens
                ):
                    await self._complete(session, consumer)
                    return session.state
        except asyncio.CancelledError:
            # The task itself was cancelled; end the session before unwinding.
            if not session.state.is_terminal:
                self._mark_cancelled(session)
            raise
        except Exception as exc:
            if session.state is SessionState.COMPLETED:
                # on_complete raised; the session already has its terminal signal.
                raise
            if session.cancel_token.cancelled:
                logger.debug("Exception after cancellation discarded: %r", exc)
                self._mark_cancelled(session)
                return session.state
            await self._fail(session, consumer, exc)
            return session.state

    @property
    def _eos_token_id(self) -> int | None:
        return getattr(self._tokenizer, "eos_token_id", None)

    async def _step(self, session: DecodeSession) -> GeneratedToken | None:
        """Run one iteration up to (not including) delivery.

        Returns:
            The new token, or ``None`` if cancellation arrived while the
            Model call was in flight (its result is discarded).
        """
        timestamp_ns = time.time_ns()
        t_start = time.perf_counter_ns()

        scores = await maybe_await(self._model.forward(list(session.sequence)))
        t_model = time.perf_counter_ns()

        if session.cancel_token.cancelled:
            return None

        dist = build_distribution(scores, session.temperature, session.temperature_floor)
        candidates = select_top_k(dist, session.top_k, self._tokenizer.decode)
        token_id = choose_next(dist, session.temperature, self._draw, session.greedy_threshold)

        rank = next((i for i, c in enumerate(candidates) if c.token_id == token_id), -1)
        if rank >= 0:
            display_text = candidates[rank].display_text
        else:
            display_text = self._tokenizer.decode(token_id)

        token = GeneratedToken(
            token_id=token_id,
            display_text=display_text,
            selected_probability=float(dist[token_id]),
            top_candidates=tuple(candidates),
        )

        t_end = time.perf_counter_ns()
        self._logger.log_token(
            TokenSamplingRecord(
                timestamp_ns=timestamp_ns,
                step=len(session.tokens),
                token_id=token_id,
                token_rank=rank,
                token_prob=token.selected_probability,
                temperature=session.temperature,
                greedy=session.temperature < session.greedy_threshold,
                shannon_entropy=distribution_entropy(dist),
                vocab_size=int(dist.size),
                model_ms=(t_model - t_start) / 1_000_000.0,
                total_step_ms=(t_end - t_start) / 1_000_000.0,
            )
        )
        return token

    @staticmethod
    def _mark_cancelled(session: DecodeSession) -> None:
        session.state = SessionState.CANCELLED
        logger.info("Decode session cancelled after %d tokens", len(session.tokens))

    @staticmethod
    async def _complete(session: DecodeSession, consumer: TokenConsumer) -> None:
        session.state = SessionState.COMPLETED
        logger.info("Decode session completed: %d tokens", len(session.tokens))
        await maybe_await(consumer.on_complete())

    @staticmethod
    async def _fail(session: DecodeSession, consumer: TokenConsumer, exc: Exception) -> None:
        step = len(session.tokens)
        error = DecodeError(f"Decode step {step} failed: {type(exc).__name__}: {exc}", step=step)
        error.__cause__ = exc
        session.error = error
        session.state = SessionState.FAILED
        logger.warning(
            "Decode session failed at step %d after %d tokens",
            step,
            len(session.tokens),
            exc_info=exc,
        )
        await maybe_await(consumer.on_error(error))
