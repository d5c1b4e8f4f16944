"""Scripted keyboard for the emulated input adapter.

Keys are held during fixed time intervals of a (usually simulated) clock.

Example:
    >>> clock = SimulatedClock()
    >>> keyboard = ScriptedKeyboard(clock, {"v": [(1.0, 1.3)]})
    >>> clock.set(1.1)
    >>> keyboard.is_key_down("v")
    True
"""

from __future__ import annotations

from typing import Dict, List, Optional

from synthetic.utils import Interval, in_any_interval, merge_intervals


class ScriptedKeyboard:
    """Key source driven by per-key (down, up) intervals."""

    def __init__(self, clock, presses: Optional[Dict[str, List[Interval]]] = None):
        self.clock = clock
        self.presses: Dict[str, List[Interval]] = {key.lower(): merge_intervals(iv) for key, iv in (presses or {}).items()}
        self.closed = False
        self.queries = 0

    def press(self, key: str, down: float, up: float) -> None:
        """Add a key press interval."""
        key = key.lower()
        self.presses[key] = merge_intervals(self.presses.get(key, []) + [(down, up)])

    def is_key_down(self, key: str) -> bool:
        self.queries += 1
        return in_any_interval(self.clock.now(), self.presses.get(key.lower(), []))

    def close(self) -> None:
        self.closed = True
