from __future__ import annotations

import pytest
import structlog

from sortviz.core.events.playback import PlaybackStarted
from sortviz.playback.driver import run_to_completion
from sortviz.session.assembly import build_session
from sortviz.session.registry import SessionRegistry


@pytest.fixture(autouse=True)
def _isolated_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


def test_removed_session_stops_recording_events() -> None:
    registry = SessionRegistry()
    handle = build_session(seed=3, driver="manual")
    registry.add(handle)

    handle.controller.on_count_submitted(5)
    handle.controller.on_sort_requested()
    run_to_completion(handle.player)
    recorded = len(handle.recorder.events)
    assert recorded > 0

    assert registry.remove(session_id=handle.session_id) is handle
    handle.bus.publish(PlaybackStarted.create(session_id=handle.session_id, total_steps=1, sequence=999))

    assert len(handle.recorder.events) == recorded
    assert registry.get(session_id=handle.session_id) is None


def test_remove_cancels_running_playback() -> None:
    registry = SessionRegistry()
    handle = build_session(seed=4, driver="manual")
    registry.add(handle)

    handle.controller.on_count_submitted(8)
    handle.controller.on_sort_requested()
    assert handle.player.is_playing

    registry.remove(session_id=handle.session_id)

    assert not handle.player.is_playing
    assert handle.scheduler.active_timers == 0
    assert handle.recorder.events[-1].event_type == "playback.cancelled"


def test_remove_keeps_unrelated_log_context() -> None:
    registry = SessionRegistry()
    structlog.contextvars.bind_contextvars(request_id="req-1")
    handle = build_session(seed=5, driver="manual")
    registry.add(handle)
    handle.controller.on_count_submitted(4)
    handle.controller.on_sort_requested()

    registry.remove(session_id=handle.session_id)

    ctx = structlog.contextvars.get_contextvars()
    assert ctx.get("request_id") == "req-1"
    assert "session_id" not in ctx
    assert "component" not in ctx


def test_remove_unknown_session_returns_none() -> None:
    assert SessionRegistry().remove(session_id="missing") is None
