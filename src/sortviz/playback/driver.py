from __future__ import annotations

from typing import Optional

from sortviz.playback.player import StepPlayer


def run_to_completion(player: StepPlayer, *, max_ticks: Optional[int] = None) -> int:
    """
    Headless driver: tick the player synchronously until playback ends.

    Returns the number of ticks issued, including the terminal one. Steps are
    delivered in trace order exactly as a timer would deliver them.
    """
    limit = max_ticks if max_ticks is not None else player.state.total_steps + 1
    if limit <= 0:
        raise ValueError("max_ticks must be > 0")

    ticks = 0
    while player.is_playing and ticks < limit:
        player.tick()
        ticks += 1
    return ticks
