"""Synthetic line helpers for scansync.

Public API to drive a ChannelMonitor without hardware or a human:
- Simulated clock (clock)
- Scripted keyboard (keyboard)
- Pulse trains and scripted input adapters (lines)
- High-level `build_scripted_session` and `build_emulated_session` to
  assemble a clock, an adapter and the ground truth in one call

These utilities are intended for demos, tests, and quick exercises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from scansync.adapters.base import InputAdapter
from scansync.adapters.emulated import EmulatedInputAdapter
from scansync.domain.config import DEFAULT_EMULATION_KEYS, DEFAULT_INPUT_LINES

from .clock import SimulatedClock
from .keyboard import ScriptedKeyboard
from .lines import PulseTrainOptions, ScriptedInputAdapter, SequenceInputAdapter, generate_pulse_intervals
from .models import ButtonPress
from .utils import Interval, deterministic_rng

__all__ = [
    # Clock and keyboard
    "SimulatedClock",
    "ScriptedKeyboard",
    # Lines
    "PulseTrainOptions",
    "generate_pulse_intervals",
    "ScriptedInputAdapter",
    "SequenceInputAdapter",
    # Models
    "ButtonPress",
    "deterministic_rng",
    # Result objects
    "LineSessionResult",
    # High-level builders
    "build_scripted_session",
    "build_emulated_session",
]


@dataclass(frozen=True)
class LineSessionResult:
    """Result object for a synthetic line session.

    Attributes
    ----------
    clock : SimulatedClock
        Clock shared by the adapter and the monitor under test.
    adapter : InputAdapter
        Adapter to pass to ``ChannelMonitor.init``.
    repetition_interval : float
        Nominal trigger interval of the session.
    trigger_intervals : List[Interval]
        Active intervals of channel 0 (empty for keyboard sessions, whose
        trigger train is anchored at the second read).
    presses : List[ButtonPress]
        Button presses scripted into the session.
    keyboard : Optional[ScriptedKeyboard]
        Key source for emulated sessions.
    """

    clock: SimulatedClock
    adapter: InputAdapter
    repetition_interval: float
    trigger_intervals: List[Interval] = field(default_factory=list)
    presses: List[ButtonPress] = field(default_factory=list)
    keyboard: Optional[ScriptedKeyboard] = None

    @property
    def trigger_onsets(self) -> List[float]:
        return [start for start, _ in self.trigger_intervals]

    def presses_on(self, channel: int) -> List[ButtonPress]:
        return [p for p in self.presses if p.channel == channel]


def build_scripted_session(
    *,
    trigger: Optional[PulseTrainOptions] = None,
    presses: Sequence[ButtonPress] = (),
    channel_count: int = len(DEFAULT_INPUT_LINES),
    start_time: float = 0.0,
) -> LineSessionResult:
    """Assemble a scripted-adapter session on a simulated clock.

    Args:
        trigger: Trigger pulse train on channel 0 (None = no trigger)
        presses: Button presses on channels 1..channel_count-1
        channel_count: Number of input lines
        start_time: Initial clock time

    Returns:
        LineSessionResult with the clock, adapter and ground truth
    """
    clock = SimulatedClock(start=start_time)
    trigger_intervals = generate_pulse_intervals(trigger) if trigger is not None else []
    adapter = ScriptedInputAdapter(channel_count, clock, {0: trigger_intervals} if trigger_intervals else {})
    for press in presses:
        adapter.hold(press.channel, [press.interval])

    return LineSessionResult(
        clock=clock,
        adapter=adapter,
        repetition_interval=trigger.interval_s if trigger is not None else 2.0,
        trigger_intervals=trigger_intervals,
        presses=list(presses),
    )


def build_emulated_session(
    *,
    repetition_interval: float = 2.0,
    presses: Sequence[ButtonPress] = (),
    channel_count: int = len(DEFAULT_INPUT_LINES),
    keys: Sequence[str] = DEFAULT_EMULATION_KEYS,
    pulse_width_s: float = 0.006,
    start_time: float = 0.0,
) -> LineSessionResult:
    """Assemble an emulated-adapter session driven by a scripted keyboard.

    Args:
        repetition_interval: Emulated trigger interval
        presses: Button presses, turned into key presses via ``keys``
        channel_count: Number of input lines
        keys: Keys mapped to channels 1..N-1
        pulse_width_s: Emulated trigger pulse width
        start_time: Initial clock time

    Returns:
        LineSessionResult with the clock, emulated adapter and keyboard
    """
    clock = SimulatedClock(start=start_time)
    keyboard = ScriptedKeyboard(clock)
    for press in presses:
        keyboard.press(press.key or keys[press.channel - 1], press.down_s, press.up_s)

    adapter = EmulatedInputAdapter(
        channel_count,
        repetition_interval=repetition_interval,
        clock=clock,
        keyboard=keyboard,
        pulse_width_s=pulse_width_s,
        keys=keys,
    )
    return LineSessionResult(
        clock=clock,
        adapter=adapter,
        repetition_interval=repetition_interval,
        presses=list(presses),
        keyboard=keyboard,
    )
