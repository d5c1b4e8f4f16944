"""Snapshot models for channel monitor state.

ChannelState is an immutable copy of a monitor's event history taken at a
point in time; WaitResult bundles the outcome of a bounded wait. Unset
timestamps are NaN, matching the numpy arrays the monitor keeps
internally.

Usage:
------
>>> times, pulse, state = monitor.wait_for([0], deadline=math.inf)
>>> state.event_count[0]
1
"""

import math
from typing import List, Literal, NamedTuple, Optional

from pydantic import BaseModel, Field

__all__ = ["ChannelState", "WaitResult"]


class ChannelState(BaseModel):
    """Event history of every channel after a poll.

    Attributes:
        channel_count: Number of configured channels
        emulating: True if the emulated adapter backs the session
        repetition_interval: Nominal interval between trigger pulses (s)
        debounce_policy: "edge" or "duration"
        first_event_time: First time each channel was seen active (NaN if never)
        last_event_time: Most recent counted event per channel (NaN if none)
        current_event_time: Event counted on the most recent poll (NaN otherwise)
        previous_level: Active level seen on the most recent poll
        event_count: Counted events per channel since init
        poll_count: Number of polls since init
    """

    model_config = {"frozen": True, "extra": "forbid"}

    channel_count: int = Field(..., ge=1)
    emulating: bool
    repetition_interval: float = Field(..., gt=0)
    debounce_policy: Literal["edge", "duration"]
    first_event_time: List[float]
    last_event_time: List[float]
    current_event_time: List[float]
    previous_level: List[bool]
    event_count: List[int]
    poll_count: int = Field(..., ge=0)

    def fired(self) -> List[int]:
        """Channels that counted an event on the most recent poll."""
        return [c for c, t in enumerate(self.current_event_time) if not math.isnan(t)]


class WaitResult(NamedTuple):
    """Outcome of ``ChannelMonitor.wait_for``.

    Unpacks as ``(event_times, pulse_number, state)``.

    Attributes:
        event_times: Event time of each requested channel, NaN if it did not fire
        pulse_number: Dead-reckoned trigger pulse number, None before the first trigger
        state: Full channel state at return
    """

    event_times: List[float]
    pulse_number: Optional[int]
    state: ChannelState

    @property
    def timed_out(self) -> bool:
        """True if none of the requested channels fired."""
        return all(math.isnan(t) for t in self.event_times)
