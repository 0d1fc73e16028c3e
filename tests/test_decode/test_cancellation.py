"""Tests for CancellationToken."""

from __future__ import annotations

import threading

from temperature_playground.decode.cancellation import CancellationToken


class TestCancellationToken:
    def test_starts_uncancelled(self) -> None:
        assert CancellationToken().cancelled is False

    def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        token.cancel()
        token.cancel()
        assert token.cancelled is True

    def test_cancel_from_other_thread(self) -> None:
        token = CancellationToken()
        thread = threading.Thread(target=token.cancel)
        thread.start()
        thread.join()
        assert token.cancelled is True

    def test_repr(self) -> None:
        assert repr(CancellationToken()) == "CancellationToken(cancelled=False)"
