"""Trigger sender: one-hot digital output writes.

Drives the output line group (by default a single line wired to the
stimulation device trigger input). Each ``send`` writes one level vector in
a single call: requested lines high, every other line low. There is no
history and no debounce.

Line numbers are 1-based, counted within the configured output line group.

Example:
    >>> from scansync.sender import TriggerSender
    >>> with TriggerSender().init() as sender:
    ...     sender.send([1])   # raise the trigger line
    ...     sender.send([])    # and lower it again
"""

import logging
import numbers
from typing import Iterable, Optional

import numpy as np

from .adapters import OutputAdapter, create_output_adapter
from .domain.config import Settings
from .exceptions import InvalidParameter, OutOfRange, UninitializedSession

__all__ = ["TriggerSender"]

logger = logging.getLogger(__name__)


class TriggerSender:
    """Output session over the configured output lines.

    Attributes:
        settings: Validated settings
        adapter: Active output adapter (None until init)
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings if settings is not None else Settings()
        self.adapter: Optional[OutputAdapter] = None

    @property
    def initialized(self) -> bool:
        return self.adapter is not None

    @property
    def channel_count(self) -> int:
        self._require_initialized()
        return self.adapter.channel_count

    @property
    def emulating(self) -> bool:
        self._require_initialized()
        return self.adapter.emulated

    def init(self, adapter: Optional[OutputAdapter] = None) -> "TriggerSender":
        """Acquire the output adapter, resetting any open session first.

        Args:
            adapter: Adapter to use instead of hardware detection

        Returns:
            self
        """
        if self.initialized:
            self.reset()

        self.adapter = adapter if adapter is not None else create_output_adapter(self.settings)
        logger.info(f"Trigger sender initialised: {self.adapter.channel_count} line(s), {'EMULATED' if self.adapter.emulated else 'hardware'}")
        return self

    def send(self, lines: Iterable[int]) -> np.ndarray:
        """Drive the requested lines high and all others low.

        Args:
            lines: 1-based output line numbers; empty lowers every line

        Returns:
            The level vector that was written

        Raises:
            OutOfRange: a line number is outside 1..channel_count
            UninitializedSession: init has not been called
            DriverError: the adapter write failed
        """
        self._require_initialized()
        if isinstance(lines, numbers.Integral):
            lines = [lines]

        levels = np.zeros(self.adapter.channel_count, dtype=bool)
        for line in lines:
            if isinstance(line, bool) or not isinstance(line, numbers.Integral):
                raise InvalidParameter(f"output line must be an integer, got {line!r}")
            if not 1 <= line <= self.adapter.channel_count:
                raise OutOfRange(f"output line {line} out of range 1..{self.adapter.channel_count}")
            levels[line - 1] = True

        self.adapter.write(levels)
        return levels

    def reset(self) -> None:
        """Release the output adapter."""
        adapter = self.adapter
        self.adapter = None
        if adapter is not None:
            adapter.close()
            logger.info("Trigger sender reset")

    def __enter__(self) -> "TriggerSender":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.reset()

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise UninitializedSession("Trigger sender is not initialised, call init() first")
