from __future__ import annotations

from dataclasses import dataclass

from sortviz.sorting.tracked_quicksort import StepTrace


@dataclass(slots=True)
class PlaybackState:
    """
    Replay cursor over one trace.

    - cursor: index of the next step to deliver
    - sequence: monotonic event sequence, kept across plays of the same player

    Guardrails:
      - advance() is only valid while running
        (prevents "steps after stop" bugs)
    """

    session_id: str
    trace: StepTrace = ()
    cursor: int = 0
    sequence: int = 0
    is_running: bool = False

    @property
    def total_steps(self) -> int:
        return len(self.trace)

    @property
    def exhausted(self) -> bool:
        return self.cursor >= len(self.trace)

    def advance(self) -> int:
        if not self.is_running:
            raise RuntimeError("cannot advance cursor when playback is not running")
        if self.exhausted:
            raise RuntimeError("cannot advance cursor past the end of the trace")
        self.cursor += 1
        return self.cursor

    def next_sequence(self) -> int:
        self.sequence += 1
        return self.sequence
