"""Simulated clock for deterministic tests and demos.

Time only moves when the code under test sleeps or the test advances it,
so a bounded wait that would take seconds of wall time runs instantly and
lands on exact timestamps.

Example:
    >>> clock = SimulatedClock(start=10.0)
    >>> clock.sleep(0.5)
    >>> clock.now()
    10.5
"""

from __future__ import annotations

from typing import List


class SimulatedClock:
    """Manually driven clock satisfying ``scansync.clock.Clock``.

    Attributes:
        t: Current simulated time in seconds
        sleeps: Every duration passed to sleep(), in call order
    """

    def __init__(self, start: float = 0.0):
        self.t = float(start)
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.t

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if seconds > 0:
            self.t += seconds

    def advance(self, seconds: float) -> float:
        """Move time forward without recording a sleep."""
        self.t += seconds
        return self.t

    def set(self, t: float) -> None:
        """Jump to an absolute time; never backwards."""
        if t < self.t:
            raise ValueError(f"SimulatedClock cannot go back from {self.t} to {t}")
        self.t = float(t)
