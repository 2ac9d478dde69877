from __future__ import annotations

import random
import re
from typing import AbstractSet, Optional, Sequence, Union

import structlog

from sortviz.core.config.settings import settings
from sortviz.numbers.generator import generate
from sortviz.playback.player import StepPlayer
from sortviz.session.errors import InvalidCount, SessionStateError, SortVizError, ValueTooLarge
from sortviz.session.presenter import Presenter
from sortviz.session.state import (
    SessionState,
    direction_toggled,
    entered_browsing,
    frame_shown,
    oriented,
    playback_finished,
    playback_started,
    returned_to_input,
)
from sortviz.sorting.tracked_quicksort import sort

log = structlog.get_logger()

_COUNT_RE = re.compile(r"^[+-]?\d+$")


def parse_count(raw: Union[int, str]) -> int:
    """
    Validate a submitted count: an int, or the text a user typed.

    Raises InvalidCount for anything that is not a positive integer.
    """
    if isinstance(raw, bool):
        raise InvalidCount(raw)

    if isinstance(raw, int):
        count = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if not _COUNT_RE.match(text):
            raise InvalidCount(raw)
        count = int(text)
    else:
        raise InvalidCount(raw)

    if count <= 0:
        raise InvalidCount(raw)
    return count


class SessionController:
    """
    Input / browsing state machine for one user session.

    Entry points are called by the presentation layer; results flow back
    through the Presenter. InvalidCount and ValueTooLarge end here as notices.
    Calls that make no sense in the current phase raise SessionStateError.
    """

    def __init__(
        self,
        *,
        session_id: str,
        presenter: Presenter,
        player: StepPlayer,
        rng: Optional[random.Random] = None,
        max_number: Optional[int] = None,
        min_value: Optional[int] = None,
        mirror_ascending: Optional[bool] = None,
    ) -> None:
        self._session_id = session_id
        self._presenter = presenter
        self._player = player
        self._rng = rng if rng is not None else random.Random()
        self._max_number = settings.max_number if max_number is None else max_number
        self._min_value = settings.min_value if min_value is None else min_value
        self._mirror = settings.mirror_ascending if mirror_ascending is None else mirror_ascending
        self._state = SessionState()

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def min_value(self) -> int:
        return self._min_value

    # ---------------- Entry points ----------------

    def on_count_submitted(self, count: Union[int, str]) -> None:
        try:
            n = parse_count(count)
        except InvalidCount as e:
            self._reject(e)
            return

        self._player.stop()
        self._load(n)

    def on_value_selected(self, value: int) -> None:
        self._require_browsing("select a value")

        try:
            if value > self._min_value:
                raise ValueTooLarge(value, self._min_value)
            n = parse_count(value)
        except SortVizError as e:
            self._reject(e)
            return

        self._player.stop()
        self._load(n)

    def on_sort_requested(self) -> None:
        self._require_browsing("sort")

        self._player.stop()
        self._state = direction_toggled(self._state)
        descending = self._state.descending

        trace = sort(self._state.sequence, descending)
        if trace:
            terminal, _ = oriented(
                trace[-1].snapshot,
                trace[-1].highlighted,
                descending=descending,
                mirror_ascending=self._mirror,
            )
        else:
            terminal = self._state.sequence

        self._state = playback_started(self._state)
        log.info(
            "session.sort_requested",
            session_id=self._session_id,
            descending=descending,
            steps=len(trace),
        )

        self._player.play(trace, self._on_step, lambda: self._on_complete(terminal))

    def on_reset_requested(self) -> None:
        self._player.stop()
        self._state = returned_to_input(self._state)
        log.info("session.reset", session_id=self._session_id)

    # ---------------- Playback callbacks ----------------

    def _on_step(self, snapshot: Sequence[int], highlighted: AbstractSet[int]) -> None:
        shown, marks = oriented(
            snapshot,
            highlighted,
            descending=self._state.descending,
            mirror_ascending=self._mirror,
        )
        self._state = frame_shown(self._state, shown, marks)
        self._presenter.render_sequence(shown, marks)

    def _on_complete(self, terminal: Sequence[int]) -> None:
        self._state = playback_finished(self._state, terminal)
        self._presenter.render_sequence(self._state.sequence, self._state.highlighted)
        log.info("session.sort_finished", session_id=self._session_id, descending=self._state.descending)

    # ---------------- Internals ----------------

    def _load(self, count: int) -> None:
        numbers = generate(
            count,
            rng=self._rng,
            max_number=self._max_number,
            min_value=self._min_value,
        )
        self._state = entered_browsing(self._state, numbers)
        self._presenter.render_sequence(self._state.sequence, self._state.highlighted)
        log.info("session.numbers_generated", session_id=self._session_id, count=count)

    def _reject(self, error: SortVizError) -> None:
        log.info("session.rejected", session_id=self._session_id, reason=type(error).__name__)
        self._presenter.notify(error.message)

    def _require_browsing(self, action: str) -> None:
        if self._state.phase != "browsing":
            raise SessionStateError(f"cannot {action} in phase {self._state.phase!r}")
