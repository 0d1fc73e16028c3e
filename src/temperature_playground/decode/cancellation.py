"""Cooperative cancellation handle shared between a requester and its sessions."""

from __future__ import annotations

import threading


class CancellationToken:
    """A flag the requester flips and the decode loop polls once per step.

    Backed by :class:`threading.Event`, so ``cancel()`` may be called from
    any thread. Cancelling is idempotent.
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation. Further calls have no additional effect."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
