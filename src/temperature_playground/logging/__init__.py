"""Diagnostic logging subsystem for temperature-playground.

Provides immutable per-token sampling records and a configurable logger
that supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from temperature_playground.logging.logger import SamplingLogger
from temperature_playground.logging.types import TokenSamplingRecord

__all__ = [
    "SamplingLogger",
    "TokenSamplingRecord",
]
