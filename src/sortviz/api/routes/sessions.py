from __future__ import annotations

from dataclasses import fields
from datetime import datetime
from typing import Any, Callable, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from sortviz.core.events.base import Event
from sortviz.playback.scheduler import ManualScheduler
from sortviz.session.assembly import SessionHandle, build_session
from sortviz.session.errors import SessionStateError
from sortviz.session.registry import SessionRegistry
from sortviz.session.state import Phase

router = APIRouter(tags=["sessions"])

# Minimal singleton for now (works in single-process dev).
registry = SessionRegistry()

_EVENT_BASE_FIELDS = {"event_id", "timestamp_utc", "sequence"}


# =========================
# Schemas
# =========================

class CreateSessionRequest(BaseModel):
    seed: int | None = Field(default=None, description="Optional RNG seed override")


class CreateSessionResponse(BaseModel):
    session_id: str


class CountRequest(BaseModel):
    # raw text is accepted and validated by the controller
    count: Union[int, str] = Field(..., description="Number of values to generate")


class SelectRequest(BaseModel):
    value: int = Field(..., description="Displayed value the user picked")


class TickRequest(BaseModel):
    ticks: int = Field(default=1, ge=1, le=10_000)


class SessionView(BaseModel):
    session_id: str
    phase: Phase
    sequence: list[int]
    highlighted: list[int]
    descending: bool
    sort_label: str
    playing: bool
    cursor: int
    total_steps: int
    notices: list[str]


class SessionsListResponse(BaseModel):
    sessions: list[SessionView]


class EventView(BaseModel):
    event_type: str
    sequence: int
    timestamp_utc: datetime
    payload: dict[str, Any]


class EventsResponse(BaseModel):
    session_id: str
    events: list[EventView]


# =========================
# Helpers
# =========================

def _handle_or_404(session_id: str) -> SessionHandle:
    handle = registry.get(session_id=session_id)
    if handle is None:
        raise HTTPException(status_code=404, detail="session not found")
    return handle


def _view(handle: SessionHandle) -> SessionView:
    state = handle.controller.state
    playback = handle.player.state
    return SessionView(
        session_id=handle.session_id,
        phase=state.phase,
        sequence=list(state.sequence),
        highlighted=sorted(state.highlighted),
        descending=state.descending,
        sort_label=state.sort_label,
        playing=state.playing,
        cursor=playback.cursor,
        total_steps=playback.total_steps,
        notices=handle.presenter.notices,
    )


def _event_view(e: Event) -> EventView:
    payload = {f.name: getattr(e, f.name) for f in fields(e) if f.name not in _EVENT_BASE_FIELDS}
    return EventView(
        event_type=e.event_type,
        sequence=e.sequence,
        timestamp_utc=e.timestamp_utc,
        payload=payload,
    )


def _apply(session_id: str, action: Callable[[SessionHandle], None]) -> SessionView:
    handle = _handle_or_404(session_id)
    try:
        action(handle)
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _view(handle)


# =========================
# Routes
# =========================

# Session endpoints are async so that they run on the event loop thread,
# which is where the asyncio playback driver schedules its ticks.

@router.post("/sessions", response_model=CreateSessionResponse)
async def create_session(payload: CreateSessionRequest) -> CreateSessionResponse:
    handle = build_session(seed=payload.seed)
    registry.add(handle)
    return CreateSessionResponse(session_id=handle.session_id)


@router.get("/sessions", response_model=SessionsListResponse)
async def list_sessions() -> SessionsListResponse:
    return SessionsListResponse(sessions=[_view(h) for h in registry.list()])


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str) -> SessionView:
    return _view(_handle_or_404(session_id))


@router.post("/sessions/{session_id}/count", response_model=SessionView)
async def submit_count(session_id: str, payload: CountRequest) -> SessionView:
    return _apply(session_id, lambda h: h.controller.on_count_submitted(payload.count))


@router.post("/sessions/{session_id}/select", response_model=SessionView)
async def select_value(session_id: str, payload: SelectRequest) -> SessionView:
    return _apply(session_id, lambda h: h.controller.on_value_selected(payload.value))


@router.post("/sessions/{session_id}/sort", response_model=SessionView)
async def request_sort(session_id: str) -> SessionView:
    return _apply(session_id, lambda h: h.controller.on_sort_requested())


@router.post("/sessions/{session_id}/reset", response_model=SessionView)
async def request_reset(session_id: str) -> SessionView:
    return _apply(session_id, lambda h: h.controller.on_reset_requested())


@router.post("/sessions/{session_id}/tick", response_model=SessionView)
async def manual_tick(session_id: str, payload: TickRequest | None = None) -> SessionView:
    handle = _handle_or_404(session_id)
    if not isinstance(handle.scheduler, ManualScheduler):
        raise HTTPException(status_code=409, detail="session is not driven manually")

    ticks = payload.ticks if payload is not None else 1
    handle.scheduler.advance(ticks)
    return _view(handle)


@router.get("/sessions/{session_id}/events", response_model=EventsResponse)
async def list_events(session_id: str) -> EventsResponse:
    handle = _handle_or_404(session_id)
    return EventsResponse(
        session_id=session_id,
        events=[_event_view(e) for e in handle.recorder.events],
    )


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str) -> None:
    if registry.remove(session_id=session_id) is None:
        raise HTTPException(status_code=404, detail="session not found")
