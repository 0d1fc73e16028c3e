"""Uniform draw sources for temperature-playground.

Re-exports the ABC, registry, and all built-in source implementations
for convenient access::

    from temperature_playground.draws import DrawSource, DrawSourceRegistry
    from temperature_playground.draws import SystemDrawSource, SeededDrawSource
"""

from temperature_playground.draws.base import DrawSource
from temperature_playground.draws.registry import DrawSourceRegistry, register_draw_source
from temperature_playground.draws.replay import ReplayDrawSource
from temperature_playground.draws.seeded import SeededDrawSource
from temperature_playground.draws.system import SystemDrawSource

__all__ = [
    "DrawSource",
    "DrawSourceRegistry",
    "ReplayDrawSource",
    "SeededDrawSource",
    "SystemDrawSource",
    "register_draw_source",
]
