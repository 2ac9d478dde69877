from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from sortviz.core.events.base import Event


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaybackStarted(Event):
    """
    Emitted when a trace starts replaying.
    """

    event_type: ClassVar[str] = "playback.started"

    session_id: str
    total_steps: int


@dataclass(frozen=True, slots=True, kw_only=True)
class StepDelivered(Event):
    """
    Emitted once per tick, as the step is handed to the presenter.
    """

    event_type: ClassVar[str] = "playback.step"

    session_id: str
    cursor: int
    snapshot: tuple[int, ...]
    highlighted: tuple[int, ...]


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaybackCompleted(Event):
    """
    Emitted when the cursor reached the end of the trace.
    """

    event_type: ClassVar[str] = "playback.completed"

    session_id: str
    steps_delivered: int


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaybackCancelled(Event):
    """
    Emitted when playback was stopped before reaching the end.
    """

    event_type: ClassVar[str] = "playback.cancelled"

    session_id: str
    cursor: int
    total_steps: int


PLAYBACK_EVENT_TYPES: tuple[str, ...] = (
    PlaybackStarted.event_type,
    StepDelivered.event_type,
    PlaybackCompleted.event_type,
    PlaybackCancelled.event_type,
)
