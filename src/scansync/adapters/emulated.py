"""Emulated digital line adapters.

Software stand-ins used when no NI-DAQmx device can be acquired, so the
rest of the package behaves the same with or without hardware.

Input emulation:
- Channel 0 produces a trigger pulse of ``pulse_width_s`` every
  ``repetition_interval`` seconds. The very first read reports every line
  inactive (a task that has not started yet); the pulse train is
  phase-anchored to the second read, which reports the first pulse.
- Channels 1..N-1 follow keyboard keys: while ``keys[c - 1]`` is held,
  channel ``c`` is active.

Output emulation performs no physical action and records the last vector.

Levels are returned with the same inversion as the hardware (active = False).

Example:
    >>> from scansync.adapters.emulated import EmulatedInputAdapter
    >>> from scansync.clock import SystemClock
    >>> adapter = EmulatedInputAdapter(9, repetition_interval=2.0, clock=SystemClock())
    >>> adapter.read()  # first read: all lines high (inactive)
    array([ True,  True,  True,  True,  True,  True,  True,  True,  True])
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from ..clock import Clock
from ..domain.config import DEFAULT_EMULATION_KEYS
from ..exceptions import DriverError
from .base import InputAdapter, OutputAdapter
from .keyboard import KeyStateSource, NullKeyboard, key_for_channel

__all__ = ["EmulatedInputAdapter", "EmulatedOutputAdapter"]

logger = logging.getLogger(__name__)


class EmulatedInputAdapter(InputAdapter):
    """Fake trigger pulse train plus keyboard-driven buttons."""

    emulated = True

    def __init__(
        self,
        channel_count: int,
        repetition_interval: float,
        clock: Clock,
        keyboard: Optional[KeyStateSource] = None,
        pulse_width_s: float = 0.006,
        keys: Sequence[str] = DEFAULT_EMULATION_KEYS,
        owns_keyboard: bool = True,
    ):
        super().__init__(channel_count)
        self.repetition_interval = repetition_interval
        self.clock = clock
        self.keyboard = keyboard if keyboard is not None else NullKeyboard()
        self.pulse_width_s = pulse_width_s
        self.keys: List[str] = list(keys)
        self.owns_keyboard = owns_keyboard
        self.read_count = 0
        self.anchor_time: Optional[float] = None

    def read(self) -> np.ndarray:
        if self.closed:
            raise DriverError("Read on a released emulated input session")

        self.read_count += 1
        wire = np.ones(self.channel_count, dtype=bool)

        # first read models a task that has not started acquiring yet
        if self.read_count == 1:
            return wire

        timenow = self.clock.now()
        if self.anchor_time is None:
            self.anchor_time = timenow
            logger.debug(f"Emulated trigger pulse train anchored at {timenow:.4f}")

        if (timenow - self.anchor_time) % self.repetition_interval < self.pulse_width_s:
            wire[0] = False

        for channel in range(1, self.channel_count):
            key = key_for_channel(self.keys, channel)
            if key is not None and self.keyboard.is_key_down(key):
                wire[channel] = False

        return wire

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        # a caller-supplied keyboard outlives the session
        if self.owns_keyboard:
            self.keyboard.close()
        logger.info("Reset emulated scansync input session")


class EmulatedOutputAdapter(OutputAdapter):
    """No-op output adapter that remembers what it was asked to write."""

    emulated = True

    def __init__(self, channel_count: int):
        super().__init__(channel_count)
        self.last_written: Optional[np.ndarray] = None
        self.write_count = 0

    def write(self, levels: Sequence[bool]) -> None:
        if self.closed:
            raise DriverError("Write on a released emulated output session")

        levels = np.asarray(levels, dtype=bool)
        if levels.shape != (self.channel_count,):
            raise DriverError(f"Expected {self.channel_count} output levels, got {levels.shape}")

        self.last_written = levels.copy()
        self.write_count += 1
        logger.debug(f"Emulated output write: {levels.astype(int).tolist()}")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        logger.info("Reset emulated scansync output session")
