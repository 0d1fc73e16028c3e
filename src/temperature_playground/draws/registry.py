"""Name-to-class lookup for uniform draw sources.

``PlaygroundConfig.draw_source`` holds a name such as ``"seeded"``; this
module turns it into a ready :class:`~.base.DrawSource`. The ``system``,
``seeded`` and ``replay`` sources register themselves when
:mod:`temperature_playground.draws` is imported. Sources shipped by other
distributions are advertised in the ``temperature_playground.draw_sources``
entry-point group and imported only when a name is not found locally.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from temperature_playground.config import PlaygroundConfig
    from temperature_playground.draws.base import DrawSource

logger = logging.getLogger("temperature_playground")

_ENTRY_POINT_GROUP = "temperature_playground.draw_sources"


def _seeded_kwargs(config: PlaygroundConfig) -> dict[str, Any]:
    return {"seed": config.draw_seed}


# Constructor arguments taken from the config, per source name.
_CONFIG_KWARGS: dict[str, Callable[[PlaygroundConfig], dict[str, Any]]] = {
    "seeded": _seeded_kwargs,
}


class DrawSourceRegistry:
    """Class-level table of draw source classes keyed by name.

    A name registered with :meth:`register` shadows an entry point of the
    same name.
    """

    _registry: ClassVar[dict[str, type[DrawSource]]] = {}
    _entry_points_loaded: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[DrawSource]], type[DrawSource]]:
        """Class decorator: make *name* resolve to the decorated source."""

        def decorator(source_cls: type[DrawSource]) -> type[DrawSource]:
            cls._registry[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def get(cls, name: str) -> type[DrawSource]:
        """Return the source class registered as *name*.

        Raises:
            KeyError: If no registered class or entry point has that name.
        """
        if name not in cls._registry and not cls._entry_points_loaded:
            cls._load_entry_points()
        try:
            return cls._registry[name]
        except KeyError:
            known = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown draw source: {name!r}. Available: {known}") from None

    @classmethod
    def build(cls, config: PlaygroundConfig) -> DrawSource:
        """Instantiate ``config.draw_source``.

        ``seeded`` is given ``config.draw_seed``. Other sources are built
        with no arguments.
        """
        source_cls = cls.get(config.draw_source)
        make_kwargs = _CONFIG_KWARGS.get(config.draw_source)
        kwargs = make_kwargs(config) if make_kwargs is not None else {}
        source = source_cls(**kwargs)
        logger.debug("Built draw source %r", source.name)
        return source

    @classmethod
    def list_available(cls) -> list[str]:
        """Sorted names of every source, entry points included."""
        if not cls._entry_points_loaded:
            cls._load_entry_points()
        return sorted(cls._registry)

    @classmethod
    def _load_entry_points(cls) -> None:
        """Import entry-point sources once. A plugin that fails to import is skipped."""
        cls._entry_points_loaded = True
        try:
            eps = importlib.metadata.entry_points(group=_ENTRY_POINT_GROUP)
        except Exception:  # Broken installed metadata
            logger.warning("Could not read entry points for %s", _ENTRY_POINT_GROUP, exc_info=True)
            return

        for ep in eps:
            if ep.name in cls._registry:
                continue
            try:
                cls._registry[ep.name] = ep.load()
            except Exception:  # Any import-time failure of a plugin
                logger.warning(
                    "Skipping draw source plugin %r (%s)", ep.name, ep.value, exc_info=True
                )
            else:
                logger.debug("Draw source %r loaded from %s", ep.name, ep.value)


register_draw_source = DrawSourceRegistry.register
