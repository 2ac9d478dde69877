from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TypeAlias

import structlog

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class Step:
    """
    One recorded partition step.

    - snapshot: full copy of the working array right after the partition
    - highlighted: indices touched by that partition's swaps
    """

    snapshot: tuple[int, ...]
    highlighted: frozenset[int]


StepTrace: TypeAlias = tuple[Step, ...]


def _before(value: int, pivot: int, descending: bool) -> bool:
    return value > pivot if descending else value < pivot


def _partition(arr: list[int], low: int, high: int, descending: bool) -> tuple[int, frozenset[int]]:
    """
    Lomuto partition of arr[low..high] around arr[high].

    Returns the pivot's final index and every index written by a swap.
    The closing pivot swap marks both positions even when i == high.
    """
    pivot = arr[high]
    i = low
    touched: set[int] = set()

    for j in range(low, high):
        if _before(arr[j], pivot, descending):
            arr[i], arr[j] = arr[j], arr[i]
            touched.add(i)
            touched.add(j)
            i += 1

    arr[i], arr[high] = arr[high], arr[i]
    touched.add(i)
    touched.add(high)

    return i, frozenset(touched)


def _quicksort(arr: list[int], low: int, high: int, descending: bool, steps: list[Step]) -> list[Step]:
    # Work stack, not call recursion: sorted input reaches depth len(arr).
    # Right range is pushed first so steps keep left-then-right order.
    pending: list[tuple[int, int]] = [(low, high)]

    while pending:
        lo, hi = pending.pop()
        if lo >= hi:
            continue

        pivot_index, touched = _partition(arr, lo, hi, descending)
        steps.append(Step(snapshot=tuple(arr), highlighted=touched))

        pending.append((pivot_index + 1, hi))
        pending.append((lo, pivot_index - 1))

    return steps


def sort(sequence: Sequence[int], descending: bool) -> StepTrace:
    """
    Quicksort a private copy of `sequence` and return the recorded trace.

    One Step per partition call, in the order the partitions run. The input is
    never mutated. Sequences of length <= 1 yield an empty trace.
    """
    arr = list(sequence)
    steps = _quicksort(arr, 0, len(arr) - 1, descending, [])

    log.debug("sort.traced", size=len(arr), descending=descending, steps=len(steps))
    return tuple(steps)
