from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import AbstractSet, Optional, Protocol, Sequence


class Presenter(Protocol):
    """
    Outbound interface to whatever draws the session.
    """

    def render_sequence(self, snapshot: Sequence[int], highlighted: AbstractSet[int]) -> None:
        ...

    def notify(self, message: str) -> None:
        ...


@dataclass(frozen=True, slots=True)
class Frame:
    index: int
    sequence: tuple[int, ...]
    highlighted: tuple[int, ...]


class FramePresenter:
    """
    Headless presenter: keeps the latest frame and recent notices so that
    polling clients (the HTTP API, tests) can read them back.
    """

    def __init__(self, *, max_notices: int = 20) -> None:
        self._frame: Optional[Frame] = None
        self._rendered = 0
        self._notices: deque[str] = deque(maxlen=max_notices)

    def render_sequence(self, snapshot: Sequence[int], highlighted: AbstractSet[int]) -> None:
        self._frame = Frame(
            index=self._rendered,
            sequence=tuple(snapshot),
            highlighted=tuple(sorted(highlighted)),
        )
        self._rendered += 1

    def notify(self, message: str) -> None:
        self._notices.append(message)

    @property
    def frame(self) -> Optional[Frame]:
        return self._frame

    @property
    def frames_rendered(self) -> int:
        return self._rendered

    @property
    def notices(self) -> list[str]:
        return list(self._notices)
