"""Synthetic digital line generation utilities.

Scripted input adapters and pulse trains for driving a ChannelMonitor on a
simulated clock, without hardware or a keyboard. Intended for tests, demos
and the scenario builders.

Features:
- `PulseTrainOptions` Pydantic model grouping pulse train knobs.
- Deterministic pulse trains (seeded RNG) with optional jitter and contact
  bounce at the leading edge.
- `ScriptedInputAdapter`: wire levels from per-channel active intervals,
  evaluated at the clock time of each read.
- `SequenceInputAdapter`: wire levels from an explicit per-read list.

Wire levels follow the hardware convention: an active line reads False.

Example:
    from synthetic.clock import SimulatedClock
    from synthetic.lines import PulseTrainOptions, ScriptedInputAdapter, generate_pulse_intervals

    clock = SimulatedClock()
    trigger = generate_pulse_intervals(PulseTrainOptions(n_pulses=5, interval_s=2.0))
    adapter = ScriptedInputAdapter(9, clock, {0: trigger})
    monitor = ChannelMonitor(clock=clock).init(2.0, adapter=adapter)
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field, model_validator

from scansync.adapters.base import InputAdapter
from scansync.exceptions import DriverError
from synthetic.utils import Interval, deterministic_rng, in_any_interval, merge_intervals

__all__ = [
    "PulseTrainOptions",
    "generate_pulse_intervals",
    "ScriptedInputAdapter",
    "SequenceInputAdapter",
]


class PulseTrainOptions(BaseModel):
    """Knobs controlling a synthetic pulse train on one line.

    Each pulse starts at ``start_time_s + i * interval_s`` (plus uniform
    jitter) and stays active for ``width_s``. With ``bounce_count > 0`` the
    leading edge chatters: the line goes active for ``bounce_gap_s``,
    inactive for ``bounce_gap_s``, and so on before it settles.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    n_pulses: int = Field(default=10, ge=0, description="Number of pulses")
    interval_s: float = Field(default=2.0, gt=0, description="Nominal interval between pulse onsets")
    width_s: float = Field(default=0.006, gt=0, description="Active duration of each pulse")
    start_time_s: float = Field(default=0.0, ge=0, description="Onset of the first pulse")
    jitter_s: float = Field(default=0.0, ge=0, description="Uniform onset jitter magnitude (+/- jitter_s)")
    bounce_count: int = Field(default=0, ge=0, description="Spurious activations before each pulse settles")
    bounce_gap_s: float = Field(default=0.001, gt=0, description="Duration of each bounce and of each gap")
    seed: int = Field(default=12345, description="Base RNG seed for deterministic generation")

    @model_validator(mode="after")
    def validate_shape(self) -> "PulseTrainOptions":
        """Pulses must not overlap and bounces must fit inside a pulse."""
        if self.width_s + 2 * self.jitter_s >= self.interval_s:
            raise ValueError(f"width_s + 2*jitter_s ({self.width_s + 2 * self.jitter_s}) must be shorter than interval_s ({self.interval_s})")
        if 2 * self.bounce_count * self.bounce_gap_s >= self.width_s:
            raise ValueError("bounces must settle within width_s")
        return self


def generate_pulse_intervals(options: Optional[PulseTrainOptions] = None, *, channel: int = 0, **overrides) -> List[Interval]:
    """Generate the active (start, end) intervals of a pulse train.

    Preferred: pass `options=PulseTrainOptions(...)`.
    Convenience: overrides accepted as kwargs (merged into options).

    Args:
        options: Pulse train knobs
        channel: Channel id mixed into the RNG seed so that channels jitter independently

    Returns:
        Sorted list of active intervals
    """
    base = options or PulseTrainOptions()
    if overrides:
        base = PulseTrainOptions(**{**base.model_dump(), **overrides})

    rng = deterministic_rng(base.seed, "line", channel)
    intervals: List[Interval] = []
    for i in range(base.n_pulses):
        onset = base.start_time_s + i * base.interval_s
        if base.jitter_s > 0:
            onset = max(0.0, onset + rng.uniform(-base.jitter_s, base.jitter_s))

        for k in range(base.bounce_count):
            bounce_start = onset + 2 * k * base.bounce_gap_s
            intervals.append((bounce_start, bounce_start + base.bounce_gap_s))

        settle = onset + 2 * base.bounce_count * base.bounce_gap_s
        intervals.append((settle, onset + base.width_s))

    return sorted(intervals)


class ScriptedInputAdapter(InputAdapter):
    """Input adapter whose lines are active during scheduled intervals.

    Attributes:
        schedule: Channel -> sorted active intervals
        read_times: Clock time of every read, in call order
    """

    emulated = True

    def __init__(self, channel_count: int, clock, schedule: Optional[Dict[int, Sequence[Interval]]] = None):
        super().__init__(channel_count)
        self.clock = clock
        self.schedule: Dict[int, List[Interval]] = {}
        self.read_times: List[float] = []
        for channel, intervals in (schedule or {}).items():
            self.hold(channel, intervals)

    def hold(self, channel: int, intervals: Sequence[Interval]) -> None:
        """Add active intervals to a channel."""
        if not 0 <= channel < self.channel_count:
            raise ValueError(f"channel {channel} out of range 0..{self.channel_count - 1}")
        self.schedule[channel] = merge_intervals(self.schedule.get(channel, []) + list(intervals))

    def read(self) -> np.ndarray:
        if self.closed:
            raise DriverError("Read on a released scripted input session")
        timenow = self.clock.now()
        self.read_times.append(timenow)
        wire = np.ones(self.channel_count, dtype=bool)
        for channel, intervals in self.schedule.items():
            if in_any_interval(timenow, intervals):
                wire[channel] = False
        return wire

    def close(self) -> None:
        self.closed = True


class SequenceInputAdapter(InputAdapter):
    """Input adapter that replays a fixed list of active-level vectors.

    Each read consumes the next vector; once exhausted the last one repeats.
    Vectors are given as active levels (True = asserted) and returned
    inverted, as the hardware would.
    """

    emulated = True

    def __init__(self, active_levels: Sequence[Sequence[bool]]):
        rows = [np.asarray(row, dtype=bool) for row in active_levels]
        if not rows:
            raise ValueError("SequenceInputAdapter needs at least one level vector")
        super().__init__(len(rows[0]))
        self.rows = rows
        self.read_count = 0

    def read(self) -> np.ndarray:
        if self.closed:
            raise DriverError("Read on a released sequence input session")
        row = self.rows[min(self.read_count, len(self.rows) - 1)]
        self.read_count += 1
        return ~row

    def close(self) -> None:
        self.closed = True
