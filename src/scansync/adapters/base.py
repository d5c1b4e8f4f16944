"""Adapter abstractions for digital line access.

An input adapter reads the wire level of every configured line in one call;
an output adapter writes one level per configured line in one call. Wire
levels follow the scanner interface convention: an asserted input line
reads as False (logic 0). Adapters never invert; the channel monitor does.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

__all__ = ["InputAdapter", "OutputAdapter"]


class InputAdapter(ABC):
    """Abstract base class for digital input adapters.

    Attributes:
        emulated: True for software stand-ins
        channel_count: Number of lines read per call
    """

    emulated: bool = False

    def __init__(self, channel_count: int):
        self.channel_count = channel_count
        self.closed = False

    @abstractmethod
    def read(self) -> np.ndarray:
        """Read the wire level of every line.

        Returns:
            Boolean array of length channel_count (asserted = False)
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying task. Safe to call more than once."""
        pass


class OutputAdapter(ABC):
    """Abstract base class for digital output adapters."""

    emulated: bool = False

    def __init__(self, channel_count: int):
        self.channel_count = channel_count
        self.closed = False

    @abstractmethod
    def write(self, levels: Sequence[bool]) -> None:
        """Write one level per configured line.

        Args:
            levels: Sequence of length channel_count
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying task. Safe to call more than once."""
        pass
