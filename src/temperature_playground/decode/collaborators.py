"""Interfaces of the collaborators the decode loop talks to.

The Model and Tokenizer are opaque: weight loading, tokenization and
network transport live outside this package. Every collaborator method may
be a plain function or a coroutine function; the loop awaits whatever
comes back when it is awaitable.
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from temperature_playground.exceptions import DecodeError
    from temperature_playground.sampling.types import GeneratedToken


@runtime_checkable
class Model(Protocol):
    """Produces next-position scores for a token sequence.

    ``forward`` receives the whole sequence on every call (no incremental
    state is assumed) and returns a 1-D score vector of vocabulary length,
    or an awaitable resolving to one. Implementations shared between
    concurrent sessions must either be safe to call concurrently or be
    wrapped in a serializing adapter.
    """

    def forward(self, sequence: list[int]) -> Any: ...


@runtime_checkable
class Tokenizer(Protocol):
    """Maps vocabulary ids to display text and names the end-of-sequence id."""

    eos_token_id: int | None

    def decode(self, token_id: int) -> str: ...


class TokenConsumer(Protocol):
    """Receives the tokens of one decode session and its terminal signal.

    ``on_token`` is awaited before the loop continues. Exactly one of
    ``on_complete`` or ``on_error`` is called when the session ends;
    cancelled sessions receive neither.
    """

    def on_token(self, token: GeneratedToken) -> Any: ...

    def on_complete(self) -> Any: ...

    def on_error(self, error: DecodeError) -> Any: ...


class CollectingConsumer:
    """Consumer that keeps every token and the terminal signal in memory."""

    def __init__(self) -> None:
        self.tokens: list[GeneratedToken] = []
        self.completed = False
        self.error: DecodeError | None = None

    def on_token(self, token: GeneratedToken) -> None:
        self.tokens.append(token)

    def on_complete(self) -> None:
        self.completed = True

    def on_error(self, error: DecodeError) -> None:
        self.error = error

    @property
    def text(self) -> str:
        """Concatenated display text of all received tokens."""
        return "".join(t.display_text for t in self.tokens)


async def maybe_await(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value
