"""Common utilities for synthetic signal generators.

Utilities provided:
- Deterministic RNG creation from a base seed and components
- Interval helpers for active-level schedules
"""

from __future__ import annotations

import random
from typing import List, Sequence, Tuple, Union

Interval = Tuple[float, float]


def deterministic_rng(seed: int, *components: Union[str, int]) -> random.Random:
    """Create a deterministic RNG from a base seed and additional components.

    The internal seed is a string in the form "{seed}:{comp1}:{comp2}:..." so
    that different components produce independent, reproducible streams.
    """

    joined = ":".join(str(c) for c in components)
    return random.Random(f"{seed}:{joined}")


def in_any_interval(t: float, intervals: Sequence[Interval]) -> bool:
    """True if ``start <= t < end`` for any (start, end) interval."""
    return any(start <= t < end for start, end in intervals)


def merge_intervals(intervals: Sequence[Interval]) -> List[Interval]:
    """Sort intervals and merge those that overlap or touch."""
    merged: List[Interval] = []
    for start, end in sorted(intervals):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
