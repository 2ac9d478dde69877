from __future__ import annotations

from dataclasses import dataclass, replace
from typing import AbstractSet, Literal, Sequence

Phase = Literal["input", "browsing"]

SORT_DESC_LABEL = "Sort ↓"
SORT_ASC_LABEL = "Sort ↑"


@dataclass(frozen=True, slots=True)
class SessionState:
    """
    Everything the presenter needs to draw a session.

    Owned by the SessionController and replaced, never mutated, by the
    transition functions below.
    """

    phase: Phase = "input"
    sequence: tuple[int, ...] = ()
    highlighted: frozenset[int] = frozenset()
    descending: bool = True
    playing: bool = False

    @property
    def sort_label(self) -> str:
        return SORT_DESC_LABEL if self.descending else SORT_ASC_LABEL


# -----------------------
# Transitions
# -----------------------

def entered_browsing(state: SessionState, sequence: Sequence[int]) -> SessionState:
    # a fresh data set always starts over in descending mode
    return replace(
        state,
        phase="browsing",
        sequence=tuple(sequence),
        highlighted=frozenset(),
        descending=True,
        playing=False,
    )


def direction_toggled(state: SessionState) -> SessionState:
    return replace(state, descending=not state.descending)


def playback_started(state: SessionState) -> SessionState:
    return replace(state, highlighted=frozenset(), playing=True)


def frame_shown(state: SessionState, snapshot: Sequence[int], highlighted: AbstractSet[int]) -> SessionState:
    return replace(state, sequence=tuple(snapshot), highlighted=frozenset(highlighted))


def playback_finished(state: SessionState, terminal: Sequence[int]) -> SessionState:
    return replace(state, sequence=tuple(terminal), highlighted=frozenset(), playing=False)


def returned_to_input(state: SessionState) -> SessionState:
    return SessionState()


# -----------------------
# Display orientation
# -----------------------

def oriented(
    snapshot: Sequence[int],
    highlighted: AbstractSet[int],
    *,
    descending: bool,
    mirror_ascending: bool,
) -> tuple[tuple[int, ...], frozenset[int]]:
    """
    Map an engine snapshot to display order.

    With mirror_ascending, ascending snapshots are shown back to front and the
    highlighted indices follow their values.
    """
    if descending or not mirror_ascending:
        return tuple(snapshot), frozenset(highlighted)

    last = len(snapshot) - 1
    return tuple(reversed(snapshot)), frozenset(last - i for i in highlighted)
