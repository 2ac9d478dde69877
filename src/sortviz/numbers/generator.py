from __future__ import annotations

import random
from typing import Optional

import structlog

log = structlog.get_logger()

MAX_NUMBER = 1000
MIN_VALUE = 30


def generate(
    count: int,
    *,
    rng: Optional[random.Random] = None,
    max_number: int = MAX_NUMBER,
    min_value: int = MIN_VALUE,
) -> list[int]:
    """
    Produce `count` uniform random integers in [1, max_number].

    At least one value is guaranteed to be <= min_value: if no draw landed
    there, one uniformly chosen position is overwritten with min_value once
    the whole sequence is built.
    """
    if count <= 0:
        raise ValueError("count must be > 0")

    rnd = rng if rng is not None else random
    numbers: list[int] = []
    has_small = False

    while len(numbers) < count:
        value = rnd.randint(1, max_number)
        if value <= min_value:
            has_small = True
        numbers.append(value)

    if not has_small:
        position = rnd.randrange(count)
        numbers[position] = min_value
        log.debug("numbers.small_value_forced", position=position, value=min_value)

    log.debug("numbers.generated", count=count)
    return numbers
