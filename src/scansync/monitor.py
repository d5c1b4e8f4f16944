"""Channel monitor: debounced, timestamped events from digital input lines.

The monitor samples every input line on demand, turns raw levels into
discrete events and keeps a per-channel event history. It is the input
half of scanner synchronisation: channel 0 carries the volume acquisition
trigger, channels 1..N-1 carry button presses.

Event counting:
---------------
Each poll captures the time first, clears the "current event" of every
channel, reads all lines in one call and inverts the wire levels once
(an asserted line reads as logic 0). Then:

- The first active sample ever seen on a channel is always counted, even
  though there is no earlier inactive sample to make an edge.
- With the "edge" policy a channel counts when it was inactive on the
  previous poll and is active now. The optional per-channel minimum
  interval guard additionally requires that much time since the last
  counted event, which absorbs contact bounce.
- With the "duration" policy an active channel counts whenever the
  minimum interval has elapsed since its last counted event, whether or
  not it was released in between.

Waiting:
--------
``wait_for`` polls once, then keeps sleeping a short quantum and polling
until a requested channel fires, or (in release mode) until every
requested channel is released, or the deadline passes. The quantum is
configured below the shortest pulse width so that no pulse falls between
two polls.

Pulse estimate:
---------------
``estimated_pulse_number`` is dead reckoning from the first trigger and
the nominal repetition interval. It never confirms pulses against
hardware.

Example:
--------
>>> import math
>>> from scansync.monitor import ChannelMonitor
>>> monitor = ChannelMonitor()
>>> monitor.init(repetition_interval=2.0)
>>> # wait for the first volume trigger
>>> start_time = monitor.wait_for([0], deadline=math.inf).event_times[0]
>>> # wait 4 s or return early on a button 1 press
>>> result = monitor.wait_for([1], deadline=monitor.clock.now() + 4)
>>> # wait for the subject to let go of button 1
>>> monitor.wait_for([1], deadline=math.inf, release=True)
>>> monitor.stop()
"""

import logging
import math
import numbers
from typing import Iterable, List, Optional

import numpy as np

from .adapters import InputAdapter, KeyStateSource, create_input_adapter
from .clock import Clock, SystemClock
from .domain.config import Settings
from .domain.state import ChannelState, WaitResult
from .exceptions import DriverError, InvalidParameter, UninitializedSession
from .utils import is_finite_positive_scalar

__all__ = ["ChannelMonitor", "TRIGGER_CHANNEL"]

logger = logging.getLogger(__name__)

TRIGGER_CHANNEL = 0


class ChannelMonitor:
    """Event-history state machine over a set of digital input lines.

    A monitor is created uninitialized; ``init`` acquires the adapter and
    allocates the history. Not thread-safe: all calls must come from one
    flow of control.

    Attributes:
        settings: Validated settings
        clock: Time source shared with the emulated adapter
        adapter: Active input adapter (None until init)
        repetition_interval: Nominal trigger interval in seconds
        first_event_time: First active sample per channel (NaN if never)
        last_event_time: Most recent counted event per channel
        current_event_time: Event counted on the most recent poll
        previous_level: Active levels seen on the most recent poll
        event_count: Counted events per channel
        poll_count: Polls since init
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        keyboard: Optional[KeyStateSource] = None,
    ):
        self.settings = settings if settings is not None else Settings()
        self.clock = clock if clock is not None else SystemClock()
        self.keyboard = keyboard

        self.adapter: Optional[InputAdapter] = None
        self.repetition_interval: Optional[float] = None
        self.min_interval: Optional[np.ndarray] = None
        self._clear_history(0)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self.adapter is not None

    @property
    def emulating(self) -> bool:
        self._require_initialized()
        return self.adapter.emulated

    @property
    def channel_count(self) -> int:
        return len(self.previous_level)

    def init(self, repetition_interval: float, adapter: Optional[InputAdapter] = None) -> "ChannelMonitor":
        """Acquire an input adapter and start a fresh event history.

        Calling init on an initialized monitor resets it first.

        Args:
            repetition_interval: Nominal interval between trigger pulses (s)
            adapter: Adapter to use instead of hardware detection

        Returns:
            self, to allow ``monitor = ChannelMonitor().init(2.0)``

        Raises:
            InvalidParameter: repetition_interval is not a finite positive scalar
        """
        if not is_finite_positive_scalar(repetition_interval):
            raise InvalidParameter(f"repetition interval must be a finite, positive scalar, got {repetition_interval!r}")

        if self.initialized:
            logger.info("Re-initialising channel monitor")
            self.reset()

        if adapter is None:
            adapter = create_input_adapter(self.settings, float(repetition_interval), self.clock, self.keyboard)
        else:
            logger.info(f"Using supplied {type(adapter).__name__}")

        channel_count = adapter.channel_count
        input_config = self.settings.input
        if input_config.min_interval_s is not None and len(input_config.min_interval_s) != channel_count:
            adapter.close()
            raise InvalidParameter(f"min_interval_s has {len(input_config.min_interval_s)} entries, adapter has {channel_count} channels")
        if input_config.debounce_policy == "duration" and input_config.min_interval_s is None:
            adapter.close()
            raise InvalidParameter("duration debounce policy requires min_interval_s")

        self.adapter = adapter
        self.repetition_interval = float(repetition_interval)
        self.min_interval = None if input_config.min_interval_s is None else np.asarray(input_config.min_interval_s, dtype=float)
        self._clear_history(channel_count)

        logger.info(
            f"Channel monitor initialised: {channel_count} channel(s), tr={self.repetition_interval}s, "
            f"debounce={input_config.debounce_policy}, {'EMULATED' if adapter.emulated else 'hardware'}"
        )
        return self

    def reset(self) -> None:
        """Release the adapter and return to the uninitialized state."""
        adapter = self.adapter
        self.adapter = None
        self.repetition_interval = None
        self.min_interval = None
        self._clear_history(0)

        if adapter is not None:
            adapter.close()
            logger.info("Channel monitor reset")

    def stop(self) -> bool:
        """Release the session.

        Returns:
            True if a session was released, False if there was nothing to stop
        """
        if not self.initialized:
            logger.warning("Channel monitor not initialised, nothing to stop")
            return False
        self.reset()
        return True

    def __enter__(self) -> "ChannelMonitor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.initialized:
            self.stop()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(self) -> ChannelState:
        """Sample all lines once and update the event history.

        Returns:
            Snapshot of the history after this poll

        Raises:
            UninitializedSession: init has not been called
            DriverError: the adapter read failed
        """
        self._require_initialized()
        self._poll()
        return self.state()

    def _poll(self) -> None:
        timenow = self.clock.now()
        self.current_event_time[:] = np.nan

        wire = np.asarray(self.adapter.read(), dtype=bool)
        if wire.shape != (self.channel_count,):
            raise DriverError(f"Adapter returned {wire.shape} levels for {self.channel_count} channel(s)")
        # asserted lines read as logic 0
        active = ~wire

        first = active & np.isnan(self.first_event_time)
        self.first_event_time[first] = timenow
        self.last_event_time[first] = timenow
        self.current_event_time[first] = timenow
        self.event_count[first] += 1

        if self.settings.input.debounce_policy == "edge":
            counted = active & ~self.previous_level & ~first
        else:
            counted = active & ~first

        if self.min_interval is not None:
            # NaN last_event_time compares False, but those channels are all in `first`
            with np.errstate(invalid="ignore"):
                counted &= (timenow - self.last_event_time) >= self.min_interval

        self.last_event_time[counted] = timenow
        self.current_event_time[counted] = timenow
        self.event_count[counted] += 1

        self.previous_level = active
        self.poll_count += 1

        if logger.isEnabledFor(logging.DEBUG):
            for channel in np.flatnonzero(first | counted):
                logger.debug(f"Channel {channel} event #{self.event_count[channel]} at {timenow:.4f}")

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    def wait_for(
        self,
        channel_indices: Iterable[int] = (),
        deadline: Optional[float] = 0.0,
        release: bool = False,
    ) -> WaitResult:
        """Poll until a requested channel fires, or until the deadline.

        Always polls at least once, so a deadline in the past still returns
        a fresh sample. With an empty channel list the call logs every event
        until the deadline.

        Args:
            channel_indices: Channels to watch (0 = trigger)
            deadline: Absolute clock time to give up at. None/NaN means
                check once; math.inf waits indefinitely
            release: Wait for every requested channel to be released
                instead of waiting for an event

        Returns:
            WaitResult(event_times, pulse_number, state)

        Raises:
            InvalidParameter: bad channel index, or an unbounded wait
                without channels
            UninitializedSession: init has not been called
        """
        self._require_initialized()
        channels = self._validate_channels(channel_indices)
        deadline = self._validate_deadline(deadline, channels)

        self._poll()
        while not self._wait_done(channels, release) and self.clock.now() < deadline:
            self.clock.sleep(self.settings.input.poll_interval_s)
            self._poll()

        event_times = [float(self.current_event_time[c]) for c in channels]
        return WaitResult(event_times=event_times, pulse_number=self.estimated_pulse_number(), state=self.state())

    def _wait_done(self, channels: List[int], release: bool) -> bool:
        if release:
            return not self.previous_level[channels].any()
        return bool(np.any(~np.isnan(self.current_event_time[channels])))

    def _validate_channels(self, channel_indices: Iterable[int]) -> List[int]:
        if isinstance(channel_indices, numbers.Integral):
            channel_indices = [channel_indices]
        channels = list(channel_indices)
        for channel in channels:
            if isinstance(channel, bool) or not isinstance(channel, numbers.Integral):
                raise InvalidParameter(f"channel index must be an integer, got {channel!r}")
            if not 0 <= channel < self.channel_count:
                raise InvalidParameter(f"channel index {channel} out of range 0..{self.channel_count - 1}")
        return [int(c) for c in channels]

    @staticmethod
    def _validate_deadline(deadline: Optional[float], channels: List[int]) -> float:
        if deadline is None or (isinstance(deadline, numbers.Real) and math.isnan(deadline)):
            return 0.0
        if isinstance(deadline, bool) or not isinstance(deadline, numbers.Real):
            raise InvalidParameter(f"deadline must be a number, got {deadline!r}")
        if math.isinf(deadline) and not channels:
            raise InvalidParameter("an unspecified channel set must be combined with a finite deadline")
        return float(deadline)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def estimated_pulse_number(self, now: Optional[float] = None) -> Optional[int]:
        """Dead-reckoned trigger pulse number since the first trigger.

        Args:
            now: Time to estimate at (default: clock.now())

        Returns:
            floor((now - first trigger) / repetition interval), or None
            before the first trigger
        """
        self._require_initialized()
        first = self.first_event_time[TRIGGER_CHANNEL]
        if math.isnan(first):
            return None
        if now is None:
            now = self.clock.now()
        return math.floor((now - first) / self.repetition_interval)

    def state(self) -> ChannelState:
        """Immutable snapshot of the event history."""
        self._require_initialized()
        return ChannelState(
            channel_count=self.channel_count,
            emulating=self.adapter.emulated,
            repetition_interval=self.repetition_interval,
            debounce_policy=self.settings.input.debounce_policy,
            first_event_time=self.first_event_time.tolist(),
            last_event_time=self.last_event_time.tolist(),
            current_event_time=self.current_event_time.tolist(),
            previous_level=self.previous_level.tolist(),
            event_count=self.event_count.tolist(),
            poll_count=self.poll_count,
        )

    def _clear_history(self, channel_count: int) -> None:
        self.first_event_time = np.full(channel_count, np.nan)
        self.last_event_time = np.full(channel_count, np.nan)
        self.current_event_time = np.full(channel_count, np.nan)
        self.previous_level = np.zeros(channel_count, dtype=bool)
        self.event_count = np.zeros(channel_count, dtype=np.int64)
        self.poll_count = 0

    def _require_initialized(self) -> None:
        if not self.initialized:
            raise UninitializedSession("Channel monitor is not initialised, call init(repetition_interval) first")
