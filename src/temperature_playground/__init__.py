"""temperature-playground: watch temperature change the next token.

An autoregressive token-sampling engine for teaching. Raw model scores are
turned into a temperature-scaled distribution, the top candidates are
exposed for visualization, and a next token is chosen greedily or by
sampling, one cancellable step at a time.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("temperature-playground")
except PackageNotFoundError:
    __version__ = "0.0.0"

from temperature_playground.config import PlaygroundConfig, resolve_config, validate_extra_args
from temperature_playground.decode import (
    CancellationToken,
    CollectingConsumer,
    DecodeLoop,
    DecodeSession,
    SessionState,
    TemperatureComparison,
    TemperatureOutput,
)
from temperature_playground.exceptions import (
    ConfigValidationError,
    DecodeError,
    PlaygroundError,
    SessionStateError,
)
from temperature_playground.sampling import (
    GREEDY_THRESHOLD,
    TEMPERATURE_FLOOR,
    Candidate,
    GeneratedToken,
    build_distribution,
    choose_next,
    select_top_k,
)

__all__ = [
    "GREEDY_THRESHOLD",
    "TEMPERATURE_FLOOR",
    "CancellationToken",
    "Candidate",
    "CollectingConsumer",
    "ConfigValidationError",
    "DecodeError",
    "DecodeLoop",
    "DecodeSession",
    "GeneratedToken",
    "PlaygroundConfig",
    "PlaygroundError",
    "SessionState",
    "SessionStateError",
    "TemperatureComparison",
    "TemperatureOutput",
    "__version__",
    "build_distribution",
    "choose_next",
    "resolve_config",
    "select_top_k",
    "validate_extra_args",
]
