from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, TypeVar
from uuid import UUID, uuid4

E = TypeVar("E", bound="Event")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True, kw_only=True)
class Event:
    """
    Base class for every event published on the EventBus.

    - event_type: class-level routing key ("<area>.<name>")
    - sequence: monotonic ordering key allocated by the publisher's state
    - event_id / timestamp_utc: filled in by create()
    """

    event_type: ClassVar[str] = "event"

    sequence: int
    event_id: UUID = field(default_factory=uuid4)
    timestamp_utc: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(cls: type[E], *, sequence: int, **fields: Any) -> E:
        if sequence <= 0:
            raise ValueError("sequence must be > 0")
        return cls(sequence=sequence, **fields)
