from __future__ import annotations

from collections import deque
from typing import Sequence

from sortviz.core.events.base import Event
from sortviz.core.events.bus import EventHandler
from sortviz.core.events.playback import PLAYBACK_EVENT_TYPES, StepDelivered


class PlaybackRecorder:
    """
    EventBus component: keeps the most recent playback events of a session.
    """

    def __init__(self, *, max_events: int = 2000) -> None:
        if max_events <= 0:
            raise ValueError("max_events must be > 0")
        self._events: deque[Event] = deque(maxlen=max_events)

    def subscriptions(self) -> Sequence[tuple[str, EventHandler]]:
        return [(et, self._on_event) for et in PLAYBACK_EVENT_TYPES]

    def _on_event(self, e: Event) -> None:
        self._events.append(e)

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    def steps(self) -> list[StepDelivered]:
        return [e for e in self._events if isinstance(e, StepDelivered)]
