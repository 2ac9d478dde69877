from __future__ import annotations

from threading import Lock
from typing import Optional

import structlog

from sortviz.core.logging.setup import clear_context, unbind_context
from sortviz.session.assembly import SessionHandle

log = structlog.get_logger()


class SessionRegistry:
    """
    Thread-safe registry of live sessions (this process only).
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._sessions: dict[str, SessionHandle] = {}

    def add(self, handle: SessionHandle) -> None:
        with self._lock:
            if handle.session_id in self._sessions:
                raise RuntimeError(f"duplicate session_id: {handle.session_id}")
            self._sessions[handle.session_id] = handle

    def get(self, *, session_id: str) -> Optional[SessionHandle]:
        with self._lock:
            return self._sessions.get(session_id)

    def list(self) -> list[SessionHandle]:
        with self._lock:
            items = list(self._sessions.values())
        items.sort(key=lambda h: h.created_at_utc, reverse=True)
        return items

    def remove(self, *, session_id: str) -> Optional[SessionHandle]:
        with self._lock:
            handle = self._sessions.pop(session_id, None)
        if handle is not None:
            handle.close()
            unbind_context("session_id", "component")
            log.info("session.closed", session_id=session_id)
        return handle

    def close_all(self) -> None:
        with self._lock:
            handles = list(self._sessions.values())
            self._sessions.clear()
        for handle in handles:
            handle.close()
        clear_context()
