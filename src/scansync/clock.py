"""Time source used by monitors and emulated adapters.

Timestamps are raw, monotonic seconds from ``time.perf_counter``. They are
only meaningful relative to each other, so deadlines passed to
``ChannelMonitor.wait_for`` must be computed from the same clock
(``clock.now() + 2.0`` to wait two seconds).
"""

import time
from typing import Protocol

__all__ = ["Clock", "SystemClock"]


class Clock(Protocol):
    """Protocol for the high-resolution time source."""

    def now(self) -> float: ...

    def sleep(self, seconds: float) -> None: ...


class SystemClock:
    """Wall clock backed by ``time.perf_counter`` and ``time.sleep``."""

    def now(self) -> float:
        return time.perf_counter()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)
