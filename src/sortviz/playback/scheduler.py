from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

TickCallback = Callable[[], None]


class TimerHandle(Protocol):
    """
    A registered repeating timer. cancel() must be idempotent.
    """

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """
    Host-provided tick source for the StepPlayer.

    The player never sleeps: it only asks the host to call it back every
    `interval` seconds until the returned handle is cancelled.
    """

    def call_every(self, interval: float, callback: TickCallback) -> TimerHandle:
        ...


class _RepeatingCall:
    """
    call_later chain on an asyncio loop.

    The next firing is scheduled before the callback runs, so a callback that
    cancels its own timer leaves nothing behind.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: TickCallback) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._fire)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioScheduler:
    """
    Real timer: ticks run on the event loop thread between other tasks.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_every(self, interval: float, callback: TickCallback) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        return _RepeatingCall(loop, interval, callback)


@dataclass(slots=True)
class _ManualTimer:
    interval: float
    callback: TickCallback
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Test/host-controlled ticks: nothing fires until advance() is called.

    The interval is recorded but ignored; one advance() fires every active
    timer exactly once.
    """

    def __init__(self) -> None:
        self._timers: list[_ManualTimer] = []

    def call_every(self, interval: float, callback: TickCallback) -> TimerHandle:
        self._timers = [t for t in self._timers if not t.cancelled]
        timer = _ManualTimer(interval=interval, callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def active_timers(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled)

    def advance(self, ticks: int = 1) -> int:
        """
        Fire all active timers `ticks` times. Returns the number of callbacks run.
        """
        if ticks < 0:
            raise ValueError("ticks must be >= 0")

        fired = 0
        for _ in range(ticks):
            # timers registered during this round wait for the next one
            for timer in list(self._timers):
                if timer.cancelled:
                    continue
                timer.callback()
                fired += 1
            self._timers = [t for t in self._timers if not t.cancelled]
        return fired
