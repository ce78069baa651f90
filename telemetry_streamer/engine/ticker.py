"""Fixed-interval tick source for the broadcast loop."""

from __future__ import annotations

import asyncio
import contextlib
import time
from collections.abc import AsyncIterator


class Ticker:
    """Async iterator yielding the epoch-millisecond timestamp of each tick.

    Ticks sit on a fixed grid measured with the event loop's monotonic
    clock.  The first tick fires immediately.  When a tick overruns, the
    missed grid slots are skipped instead of being fired back to back.
    """

    def __init__(self, interval: float) -> None:
        if interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {interval}")
        self._interval = interval
        self._stopped = asyncio.Event()
        self._next: float | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        """End iteration, waking a pending sleep immediately."""
        self._stopped.set()

    def __aiter__(self) -> AsyncIterator[int]:
        return self

    async def __anext__(self) -> int:
        loop = asyncio.get_running_loop()
        if self._next is None:
            self._next = loop.time()

        delay = self._next - loop.time()
        if delay > 0 and not self._stopped.is_set():
            with contextlib.suppress(TimeoutError):
                await asyncio.wait_for(self._stopped.wait(), timeout=delay)
        if self._stopped.is_set():
            raise StopAsyncIteration

        now = loop.time()
        self._next += self._interval
        if self._next <= now:
            missed = int((now - self._next) // self._interval) + 1
            self._next += missed * self._interval
        return int(time.time() * 1000)
