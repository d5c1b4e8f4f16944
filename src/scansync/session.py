"""Function-style entry points for scanner synchronisation sessions.

Thin wrappers around ChannelMonitor and TriggerSender for scripts that
prefer a procedural interface. The caller owns the returned session
objects and passes them back in; keeping a single session per process is
the caller's convention.

Example:
    >>> import math
    >>> from scansync.session import init_input, poll_input, stop_input
    >>> monitor = init_input(2.0)
    >>> start_time, = poll_input(monitor, [0], math.inf).event_times
    >>> times, pulse, state = poll_input(monitor, [], monitor.clock.now() + 2)
    >>> state.last_event_time[0]   # most recent trigger during those 2 s
    >>> stop_input(monitor)
"""

from typing import Iterable, Optional

import numpy as np

from .adapters import InputAdapter, KeyStateSource, OutputAdapter
from .clock import Clock
from .domain.config import Settings
from .domain.state import WaitResult
from .monitor import ChannelMonitor
from .sender import TriggerSender

__all__ = [
    "init_input",
    "reset_input",
    "stop_input",
    "poll_input",
    "init_output",
    "reset_output",
    "send_output",
]


def init_input(
    repetition_interval: float,
    settings: Optional[Settings] = None,
    clock: Optional[Clock] = None,
    keyboard: Optional[KeyStateSource] = None,
    adapter: Optional[InputAdapter] = None,
) -> ChannelMonitor:
    """Create and initialise an input session."""
    return ChannelMonitor(settings=settings, clock=clock, keyboard=keyboard).init(repetition_interval, adapter=adapter)


def reset_input(monitor: ChannelMonitor) -> None:
    """Release an input session."""
    monitor.reset()


def stop_input(monitor: ChannelMonitor) -> bool:
    """Release an input session; False if it was not running."""
    return monitor.stop()


def poll_input(
    monitor: ChannelMonitor,
    channel_indices: Iterable[int] = (),
    deadline: Optional[float] = 0.0,
    release: bool = False,
) -> WaitResult:
    """Poll the input session until an event, a release, or the deadline.

    See ChannelMonitor.wait_for.
    """
    return monitor.wait_for(channel_indices, deadline=deadline, release=release)


def init_output(settings: Optional[Settings] = None, adapter: Optional[OutputAdapter] = None) -> TriggerSender:
    """Create and initialise an output session."""
    return TriggerSender(settings=settings).init(adapter=adapter)


def reset_output(sender: TriggerSender) -> None:
    """Release an output session."""
    sender.reset()


def send_output(sender: TriggerSender, lines: Iterable[int]) -> np.ndarray:
    """Write a one-hot level vector to the output session."""
    return sender.send(lines)
