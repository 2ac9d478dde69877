from __future__ import annotations

import asyncio
import random
import secrets
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal, Optional

import structlog

from sortviz.core.config.settings import settings
from sortviz.core.events.bus import EventBus
from sortviz.core.events.router import ComponentRouter, RouterWiring
from sortviz.core.logging.setup import bind_context
from sortviz.playback.player import StepPlayer
from sortviz.playback.recorder import PlaybackRecorder
from sortviz.playback.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from sortviz.session.controller import SessionController
from sortviz.session.presenter import FramePresenter

log = structlog.get_logger()

PlaybackDriver = Literal["asyncio", "manual"]


@dataclass(frozen=True, slots=True)
class SessionHandle:
    """
    Live, wired objects of one session.
    """
    session_id: str
    seed: Optional[int]
    driver: PlaybackDriver
    created_at_utc: datetime

    bus: EventBus
    scheduler: Scheduler
    player: StepPlayer
    presenter: FramePresenter
    recorder: PlaybackRecorder
    controller: SessionController
    wiring: RouterWiring

    def close(self) -> None:
        self.player.stop()
        for wired in self.wiring.subscriptions:
            self.bus.unsubscribe(wired.subscription)


def new_session_id() -> str:
    created_at = datetime.now(timezone.utc)
    # entropy suffix avoids collisions within the same second
    return f"{created_at.strftime('%Y%m%dT%H%M%SZ')}_{secrets.token_hex(4)}"


def build_session(
    *,
    seed: Optional[int] = None,
    driver: Optional[PlaybackDriver] = None,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    interval_ms: Optional[int] = None,
) -> SessionHandle:
    """
    Canonical assembly: scheduler -> player -> recorder wiring -> controller.

    The asyncio driver binds to `loop`, or to the running loop when the first
    playback starts.
    """
    session_id = new_session_id()
    driver = settings.playback_driver if driver is None else driver
    seed = settings.default_seed if seed is None else seed

    if driver == "asyncio":
        scheduler: Scheduler = AsyncioScheduler(loop)
    elif driver == "manual":
        scheduler = ManualScheduler()
    else:
        raise ValueError(f"unsupported playback driver: {driver!r}")

    bus = EventBus()
    player = StepPlayer(session_id=session_id, scheduler=scheduler, bus=bus, interval_ms=interval_ms)
    recorder = PlaybackRecorder()
    wiring = ComponentRouter(bus=bus).register([recorder])

    presenter = FramePresenter()
    controller = SessionController(
        session_id=session_id,
        presenter=presenter,
        player=player,
        rng=random.Random(seed),
    )

    bind_context(session_id=session_id)
    log.info("session.created", session_id=session_id, seed=seed, driver=driver)

    return SessionHandle(
        session_id=session_id,
        seed=seed,
        driver=driver,
        created_at_utc=datetime.now(timezone.utc),
        bus=bus,
        scheduler=scheduler,
        player=player,
        presenter=presenter,
        recorder=recorder,
        controller=controller,
        wiring=wiring,
    )
