from __future__ import annotations

from typing import Any, Callable

import pytest


class FakeHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.fired = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled


class FakeLoop:
    """Deterministic stand-in for an asyncio loop's timer API."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeHandle] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback, args)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [handle for handle in self.handles if not handle.cancelled() and not handle.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [handle for handle in self.pending if handle.when <= target]
            if not due:
                break
            handle = min(due, key=lambda item: item.when)
            self.now = handle.when
            handle.fired = True
            handle.callback(*handle.args)
        self.now = target


@pytest.fixture
def fake_loop() -> FakeLoop:
    return FakeLoop()
