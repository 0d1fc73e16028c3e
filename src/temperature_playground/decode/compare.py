"""Side-by-side generation of one prompt at several temperatures.

Each temperature gets its own :class:`~.loop.DecodeLoop` and draw source so
sessions share nothing mutable except the Model. When the sessions run
concurrently and ``serialize_model`` is set, calls into the shared Model go
through :class:`SerializedModel`, one at a time.

With a seeded draw source every session draws the same sequence of
uniform values, so differences between the outputs come from temperature
alone.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from temperature_playground.config import PlaygroundConfig
from temperature_playground.decode.cancellation import CancellationToken
from temperature_playground.decode.collaborators import maybe_await
from temperature_playground.decode.loop import DecodeLoop, SessionState
from temperature_playground.draws.registry import DrawSourceRegistry
from temperature_playground.logging.logger import SamplingLogger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from temperature_playground.decode.collaborators import Model, Tokenizer
    from temperature_playground.exceptions import DecodeError
    from temperature_playground.sampling.types import GeneratedToken

logger = logging.getLogger("temperature_playground")


class SerializedModel:
    """Model adapter that admits one ``forward`` call at a time.

    Args:
        model: The shared Model. Its ``forward`` may be sync or async.
    """

    def __init__(self, model: Model) -> None:
        self._model = model
        self._lock = asyncio.Lock()

    async def forward(self, sequence: list[int]) -> Any:
        async with self._lock:
            return await maybe_await(self._model.forward(sequence))


@dataclass(frozen=True, slots=True)
class TemperatureOutput:
    """Outcome of one temperature's session.

    Attributes:
        temperature: Temperature the session ran at.
        tokens: Tokens emitted, in order.
        state: Terminal session state.
        error: Failure description, or ``None``.
    """

    temperature: float
    tokens: tuple[GeneratedToken, ...]
    state: SessionState
    error: str | None = None

    @property
    def content(self) -> str:
        """Full text, the display texts of all tokens joined."""
        return "".join(t.display_text for t in self.tokens)


class _ForwardingConsumer:
    """Tags every token with its temperature and passes it to a shared callback."""

    def __init__(
        self,
        temperature: float,
        on_token: Callable[[float, GeneratedToken], Any] | None,
    ) -> None:
        self._temperature = temperature
        self._on_token = on_token

    async def on_token(self, token: GeneratedToken) -> None:
        if self._on_token is not None:
            await maybe_await(self._on_token(self._temperature, token))

    def on_complete(self) -> None:
        logger.debug("temperature=%.3f finished", self._temperature)

    def on_error(self, error: DecodeError) -> None:
        logger.debug("temperature=%.3f failed: %s", self._temperature, error)


class TemperatureComparison:
    """Runs one prompt at several temperatures and collects the outputs.

    Args:
        model: Shared Model.
        tokenizer: Shared Tokenizer.
        config: Defaults (temperatures, top_k, max_tokens, draw source).
            Loaded from the environment when ``None``.
        draw_source_factory: Builds a fresh draw source per session. Uses
            ``DrawSourceRegistry.build(config)`` when ``None``.
    """

    def __init__(
        self,
        model: Model,
        tokenizer: Tokenizer,
        config: PlaygroundConfig | None = None,
        draw_source_factory: Callable[[], Callable[[], float]] | None = None,
    ) -> None:
        self._config = config if config is not None else PlaygroundConfig()
        self._model = model
        self._tokenizer = tokenizer
        self._draw_source_factory = draw_source_factory or (
            lambda: DrawSourceRegistry.build(self._config)
        )
        self._logger = SamplingLogger(self._config)

    @property
    def sampling_logger(self) -> SamplingLogger:
        return self._logger

    async def run(
        self,
        prompt_ids: Iterable[int],
        temperatures: Iterable[float] | None = None,
        *,
        max_tokens: int | None = None,
        top_k: int | None = None,
        concurrent: bool = True,
        cancel_token: CancellationToken | None = None,
        on_token: Callable[[float, GeneratedToken], Any] | None = None,
    ) -> list[TemperatureOutput]:
        """Generate from *prompt_ids* once per temperature.

        Args:
            prompt_ids: Tokenized prompt shared by all sessions.
            temperatures: Temperatures to compare. ``config.temperatures``
                when ``None``.
            max_tokens: Per-session budget, ``config.max_tokens`` when ``None``.
            top_k: Candidates per step, ``config.top_k`` when ``None``.
            concurrent: Run sessions as concurrent tasks instead of one
                after another.
            cancel_token: Cancels every session at once.
            on_token: Called (and awaited) with ``(temperature, token)`` for
                every emitted token.

        Returns:
            One output per temperature, in the order given.
        """
        prompt = list(prompt_ids)
        temps = list(self._config.temperatures if temperatures is None else temperatures)
        cancel_token = cancel_token if cancel_token is not None else CancellationToken()

        model: Model = self._model
        if concurrent and self._config.serialize_model and len(temps) > 1:
            model = SerializedModel(self._model)

        sessions = []
        for temp in temps:
            loop = DecodeLoop(
                model,
                self._tokenizer,
                config=self._config,
                draw_source=self._draw_source_factory(),
                sampling_logger=self._logger,
            )
            session = loop.new_session(
                prompt,
                temperature=temp,
                max_tokens=max_tokens,
                top_k=top_k,
                cancel_token=cancel_token,
            )
            sessions.append((loop, session, _ForwardingConsumer(temp, on_token)))

        logger.info(
            "Comparing %d temperatures (%s)",
            len(temps),
            "concurrent" if concurrent else "sequential",
        )
        if concurrent:
            await asyncio.gather(*(loop.run(s, c) for loop, s, c in sessions))
        else:
            for loop, session, consumer in sessions:
                await loop.run(session, consumer)

        return [
            TemperatureOutput(
                temperature=temp,
                tokens=tuple(session.tokens),
                state=session.state,
                error=str(session.error) if session.error is not None else None,
            )
            for temp, (_, session, _) in zip(temps, sessions)
        ]
