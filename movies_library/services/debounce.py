from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[..., TimerHandle]


def loop_call_later(delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback, *args)


class Debouncer:
    """Run ``callback`` once input has been quiet for ``delay`` seconds.

    ``schedule`` restarts the quiet window on every call, so only the last
    value inside a burst is delivered. ``flush_now`` skips the window.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[Any], Any],
        *,
        scheduler: Scheduler | None = None,
    ):
        if delay <= 0:
            raise ValueError("delay must be greater than 0")
        self.delay = delay
        self.callback = callback
        self._scheduler = scheduler or loop_call_later
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, value: Any) -> None:
        self.cancel()
        self._handle = self._scheduler(self.delay, self._fire, value)

    def flush_now(self, value: Any) -> None:
        self.cancel()
        self.callback(value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: Any) -> None:
        self._handle = None
        self.callback(value)
