from __future__ import annotations

import random
from collections import Counter
from typing import AbstractSet, Optional, Sequence

import pytest

from sortviz.playback.driver import run_to_completion
from sortviz.playback.player import StepPlayer
from sortviz.playback.scheduler import ManualScheduler
from sortviz.session.controller import SessionController, parse_count
from sortviz.session.errors import InvalidCount, SessionStateError
from sortviz.session.state import SORT_ASC_LABEL, SORT_DESC_LABEL, oriented

INVALID_COUNT = "Enter a valid positive number."
TOO_LARGE = "Please select a value smaller or equal to 30."


class RecordingPresenter:
    def __init__(self) -> None:
        self.frames: list[tuple[tuple[int, ...], frozenset[int]]] = []
        self.notices: list[str] = []

    def render_sequence(self, snapshot: Sequence[int], highlighted: AbstractSet[int]) -> None:
        self.frames.append((tuple(snapshot), frozenset(highlighted)))

    def notify(self, message: str) -> None:
        self.notices.append(message)


def _controller(*, seed: int = 1, mirror: Optional[bool] = None):
    scheduler = ManualScheduler()
    player = StepPlayer(session_id="s1", scheduler=scheduler, interval_ms=300)
    presenter = RecordingPresenter()
    controller = SessionController(
        session_id="s1",
        presenter=presenter,
        player=player,
        rng=random.Random(seed),
        max_number=1000,
        min_value=30,
        mirror_ascending=mirror,
    )
    return controller, presenter, player, scheduler


# --- count parsing ---

@pytest.mark.parametrize("raw,expected", [(5, 5), ("7", 7), ("  12 ", 12), ("+3", 3)])
def test_parse_count_accepts_positive_integers(raw, expected: int) -> None:
    assert parse_count(raw) == expected


@pytest.mark.parametrize("raw", ["", "abc", "0", "-4", "1.5", "1_000", 0, -2, True, None])
def test_parse_count_rejects_everything_else(raw) -> None:
    with pytest.raises(InvalidCount):
        parse_count(raw)


# --- input phase ---

def test_invalid_count_is_surfaced_as_notice() -> None:
    controller, presenter, _, _ = _controller()

    controller.on_count_submitted("abc")
    controller.on_count_submitted("0")

    assert presenter.notices == [INVALID_COUNT, INVALID_COUNT]
    assert presenter.frames == []
    assert controller.state.phase == "input"


def test_valid_count_enters_browsing_with_fresh_numbers() -> None:
    controller, presenter, _, _ = _controller()

    controller.on_count_submitted(" 8 ")

    state = controller.state
    assert state.phase == "browsing"
    assert len(state.sequence) == 8
    assert any(v <= 30 for v in state.sequence)
    assert state.descending is True
    assert state.sort_label == SORT_DESC_LABEL
    assert presenter.frames == [(state.sequence, frozenset())]


def test_sort_and_select_need_browsing_phase() -> None:
    controller, _, _, _ = _controller()

    with pytest.raises(SessionStateError):
        controller.on_sort_requested()
    with pytest.raises(SessionStateError):
        controller.on_value_selected(5)


# --- drill-down ---

def test_selecting_large_value_is_rejected_without_changes() -> None:
    controller, presenter, _, _ = _controller()
    controller.on_count_submitted(6)
    before = controller.state

    controller.on_value_selected(31)

    assert presenter.notices == [TOO_LARGE]
    assert controller.state == before


def test_selecting_small_value_regenerates_and_resets_direction() -> None:
    controller, presenter, player, scheduler = _controller()
    controller.on_count_submitted(10)
    controller.on_sort_requested()
    scheduler.advance()
    assert player.is_playing
    assert controller.state.descending is False

    controller.on_value_selected(30)

    state = controller.state
    assert len(state.sequence) == 30
    assert state.descending is True
    assert state.playing is False
    assert state.highlighted == frozenset()
    assert not player.is_playing
    assert scheduler.active_timers == 0
    assert presenter.frames[-1] == (state.sequence, frozenset())


# --- sorting ---

def test_first_sort_is_ascending_and_shown_reversed() -> None:
    controller, presenter, player, _ = _controller(seed=5)
    controller.on_count_submitted(12)
    original = controller.state.sequence

    controller.on_sort_requested()
    assert controller.state.descending is False
    assert controller.state.sort_label == SORT_ASC_LABEL
    assert controller.state.playing is True

    total = player.state.total_steps
    run_to_completion(player)

    state = controller.state
    assert state.playing is False
    assert state.highlighted == frozenset()
    # ascending results are displayed back to front by default
    assert list(state.sequence) == sorted(original, reverse=True)
    assert Counter(state.sequence) == Counter(original)
    # initial render + one per step + final render
    assert len(presenter.frames) == 1 + total + 1
    assert presenter.frames[-1] == (state.sequence, frozenset())


def test_second_sort_toggles_back_to_descending() -> None:
    controller, _, player, _ = _controller(seed=9)
    controller.on_count_submitted(15)
    original = controller.state.sequence

    controller.on_sort_requested()
    run_to_completion(player)
    controller.on_sort_requested()
    run_to_completion(player)

    assert controller.state.descending is True
    assert list(controller.state.sequence) == sorted(original, reverse=True)


def test_frames_carry_step_highlights() -> None:
    controller, presenter, _, scheduler = _controller(seed=2)
    controller.on_count_submitted(6)

    controller.on_sort_requested()
    scheduler.advance()

    snapshot, highlighted = presenter.frames[-1]
    assert highlighted
    assert controller.state.sequence == snapshot
    assert controller.state.highlighted == highlighted


def test_sort_while_playing_replaces_playback() -> None:
    controller, presenter, player, scheduler = _controller(seed=4)
    controller.on_count_submitted(20)

    controller.on_sort_requested()
    scheduler.advance(2)
    controller.on_sort_requested()

    assert scheduler.active_timers == 1
    assert controller.state.descending is True

    run_to_completion(player)
    assert list(controller.state.sequence) == sorted(controller.state.sequence, reverse=True)


def test_single_value_sort_completes_without_a_tick() -> None:
    controller, presenter, player, scheduler = _controller()
    controller.on_count_submitted(1)
    original = controller.state.sequence

    controller.on_sort_requested()

    assert player.state.total_steps == 0
    assert not player.is_playing
    assert scheduler.active_timers == 0
    assert controller.state.sequence == original
    assert controller.state.playing is False
    assert len(presenter.frames) == 2


# --- reset ---

def test_reset_cancels_playback_and_returns_to_input() -> None:
    controller, presenter, player, scheduler = _controller()
    controller.on_count_submitted(10)
    controller.on_sort_requested()
    scheduler.advance()
    frames = len(presenter.frames)

    controller.on_reset_requested()

    assert controller.state.phase == "input"
    assert controller.state.sequence == ()
    assert not player.is_playing

    scheduler.advance(10)
    assert len(presenter.frames) == frames


# --- display orientation ---

def test_oriented_mirrors_ascending_only_when_enabled() -> None:
    snap, marks = (1, 5, 30, 40), frozenset({0, 3})

    assert oriented(snap, marks, descending=False, mirror_ascending=False) == (snap, marks)
    assert oriented(snap, marks, descending=True, mirror_ascending=True) == (snap, marks)
    assert oriented(snap, frozenset({0, 1}), descending=False, mirror_ascending=True) == (
        (40, 30, 5, 1),
        frozenset({3, 2}),
    )


def test_unmirrored_ascending_sort_keeps_engine_order() -> None:
    controller, presenter, player, _ = _controller(seed=11, mirror=False)
    controller.on_count_submitted(9)
    original = controller.state.sequence

    controller.on_sort_requested()
    run_to_completion(player)

    assert list(controller.state.sequence) == sorted(original)
    assert presenter.frames[-1] == (controller.state.sequence, frozenset())


def test_default_controller_mirrors_ascending_frames() -> None:
    scheduler = ManualScheduler()
    player = StepPlayer(session_id="s1", scheduler=scheduler)
    presenter = RecordingPresenter()
    controller = SessionController(
        session_id="s1", presenter=presenter, player=player, rng=random.Random(6)
    )
    controller.on_count_submitted(6)
    original = controller.state.sequence

    controller.on_sort_requested()
    first_step = player.state.trace[0]
    scheduler.advance()

    n = len(original)
    assert presenter.frames[-1] == (
        tuple(reversed(first_step.snapshot)),
        frozenset(n - 1 - i for i in first_step.highlighted),
    )

    run_to_completion(player)
    assert list(controller.state.sequence) == sorted(original, reverse=True)
