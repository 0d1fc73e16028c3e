"""Decode subsystem for temperature-playground.

Drives the cancellable, one-token-at-a-time generation loop and the
side-by-side temperature comparison built on top of it.
"""

from temperature_playground.decode.cancellation import CancellationToken
from temperature_playground.decode.collaborators import (
    CollectingConsumer,
    Model,
    TokenConsumer,
    Tokenizer,
)
from temperature_playground.decode.compare import (
    SerializedModel,
    TemperatureComparison,
    TemperatureOutput,
)
from temperature_playground.decode.loop import DecodeLoop, DecodeSession, SessionState

__all__ = [
    "CancellationToken",
    "CollectingConsumer",
    "DecodeLoop",
    "DecodeSession",
    "Model",
    "SerializedModel",
    "SessionState",
    "TemperatureComparison",
    "TemperatureOutput",
    "TokenConsumer",
    "Tokenizer",
]
