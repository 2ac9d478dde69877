from __future__ import annotations

from typing import AbstractSet, Callable, Optional

import structlog

from sortviz.core.config.settings import settings
from sortviz.core.events.bus import EventBus
from sortviz.core.events.playback import StepDelivered
from sortviz.playback.lifecycle import PlaybackLifecycle
from sortviz.playback.scheduler import Scheduler, TimerHandle
from sortviz.playback.state import PlaybackState
from sortviz.sorting.tracked_quicksort import Step, StepTrace

log = structlog.get_logger()

StepCallback = Callable[[tuple[int, ...], AbstractSet[int]], None]
CompleteCallback = Callable[[], None]


class StepPlayer:
    """
    Timed, restartable cursor over a recorded step trace.

    play() registers one repeating timer with the scheduler; every firing calls
    tick(), which delivers exactly one step or, once the cursor reached the end,
    stops the timer and fires on_complete. At most one timer is active per
    player: playing a new trace cancels the previous one first.
    """

    def __init__(
        self,
        *,
        session_id: str,
        scheduler: Scheduler,
        bus: Optional[EventBus] = None,
        interval_ms: Optional[int] = None,
    ) -> None:
        interval_ms = settings.tick_interval_ms if interval_ms is None else interval_ms
        if interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")

        self._bus = bus if bus is not None else EventBus()
        self._scheduler = scheduler
        self._interval = interval_ms / 1000.0
        self._state = PlaybackState(session_id=session_id)
        self._lifecycle = PlaybackLifecycle(bus=self._bus, state=self._state)

        self._timer: Optional[TimerHandle] = None
        self._on_step: Optional[StepCallback] = None
        self._on_complete: Optional[CompleteCallback] = None

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state.is_running

    def play(self, trace: StepTrace, on_step: StepCallback, on_complete: CompleteCallback) -> None:
        if self._state.is_running:
            self.stop()

        self._lifecycle.start(trace)
        if self._state.exhausted:
            # nothing to replay: complete now instead of waiting for a tick
            self._lifecycle.stop(completed=True)
            on_complete()
            return

        self._on_step = on_step
        self._on_complete = on_complete
        self._timer = self._scheduler.call_every(self._interval, self._on_timer)

    def tick(self) -> Optional[Step]:
        """
        Advance playback by one step.

        Returns the delivered Step, or None when nothing was delivered
        (not playing, or this tick reached the end of the trace).
        """
        if not self._state.is_running:
            return None

        if self._state.exhausted:
            on_complete = self._on_complete
            self._release()
            self._lifecycle.stop(completed=True)
            if on_complete is not None:
                on_complete()
            return None

        index = self._state.cursor
        step = self._state.trace[index]
        self._state.advance()

        self._bus.publish(
            StepDelivered.create(
                session_id=self._state.session_id,
                cursor=index,
                snapshot=step.snapshot,
                highlighted=tuple(sorted(step.highlighted)),
                sequence=self._state.next_sequence(),
            )
        )

        if self._on_step is not None:
            self._on_step(step.snapshot, step.highlighted)
        return step

    def stop(self) -> None:
        """
        Cancel playback. The cursor stays where it was; safe to call when idle.
        """
        if not self._state.is_running:
            return
        self._release()
        self._lifecycle.stop(completed=False)

    def _on_timer(self) -> None:
        self.tick()

    def _release(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._on_step = None
        self._on_complete = None
