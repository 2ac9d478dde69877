from __future__ import annotations

import structlog

from sortviz.core.events.bus import EventBus
from sortviz.core.events.playback import PlaybackCancelled, PlaybackCompleted, PlaybackStarted
from sortviz.core.logging.setup import bind_context
from sortviz.playback.state import PlaybackState
from sortviz.sorting.tracked_quicksort import StepTrace

log = structlog.get_logger()


class PlaybackLifecycle:
    """
    Explicit playback lifecycle controller.

    Ensures start/stop transitions are correct and audited via events.
    """

    def __init__(self, *, bus: EventBus, state: PlaybackState) -> None:
        self._bus = bus
        self._state = state

    @property
    def state(self) -> PlaybackState:
        return self._state

    def start(self, trace: StepTrace) -> None:
        if self._state.is_running:
            raise RuntimeError("playback already running")

        bind_context(session_id=self._state.session_id, component="player")

        self._state.trace = trace
        self._state.cursor = 0
        self._state.is_running = True

        self._bus.publish(
            PlaybackStarted.create(
                session_id=self._state.session_id,
                total_steps=len(trace),
                sequence=self._state.next_sequence(),
            )
        )

        log.info("playback.started", session_id=self._state.session_id, total_steps=len(trace))

    def stop(self, *, completed: bool) -> None:
        if not self._state.is_running:
            raise RuntimeError("playback not running")

        self._state.is_running = False

        if completed:
            self._bus.publish(
                PlaybackCompleted.create(
                    session_id=self._state.session_id,
                    steps_delivered=self._state.cursor,
                    sequence=self._state.next_sequence(),
                )
            )
            log.info("playback.completed", session_id=self._state.session_id, steps=self._state.cursor)
        else:
            self._bus.publish(
                PlaybackCancelled.create(
                    session_id=self._state.session_id,
                    cursor=self._state.cursor,
                    total_steps=self._state.total_steps,
                    sequence=self._state.next_sequence(),
                )
            )
            log.info(
                "playback.cancelled",
                session_id=self._state.session_id,
                cursor=self._state.cursor,
                total_steps=self._state.total_steps,
            )
