"""scansync: scanner trigger and button-box synchronisation.

Software synchronisation layer between an experiment script and the
scanner interface box: a channel monitor that turns digital input lines
(acquisition trigger, response buttons) into debounced, timestamped events
with a bounded wait, and a trigger sender for digital output pulses. When
no NI-DAQmx device is present both fall back to emulation, loudly.

Example:
    >>> import math
    >>> from scansync import ChannelMonitor, TriggerSender
    >>> monitor = ChannelMonitor().init(repetition_interval=2.0)
    >>> trigger_time = monitor.wait_for([0], deadline=math.inf).event_times[0]
    >>> button_time = monitor.wait_for([1], deadline=trigger_time + 4).event_times[0]
    >>> monitor.stop()
"""

__version__ = "0.1.0"

from .clock import Clock, SystemClock
from .config import load_settings
from .domain import ChannelState, Settings, WaitResult
from .exceptions import (
    DeviceUnavailable,
    DriverError,
    EmulationWarning,
    InvalidParameter,
    OutOfRange,
    ScanSyncError,
    UninitializedSession,
)
from .monitor import TRIGGER_CHANNEL, ChannelMonitor
from .sender import TriggerSender
from .session import init_input, init_output, poll_input, reset_input, reset_output, send_output, stop_input

__all__ = [
    # Sessions
    "ChannelMonitor",
    "TriggerSender",
    "TRIGGER_CHANNEL",
    # Entry points
    "init_input",
    "reset_input",
    "stop_input",
    "poll_input",
    "init_output",
    "reset_output",
    "send_output",
    # Models and configuration
    "ChannelState",
    "WaitResult",
    "Settings",
    "load_settings",
    "Clock",
    "SystemClock",
    # Exceptions
    "ScanSyncError",
    "InvalidParameter",
    "OutOfRange",
    "DeviceUnavailable",
    "DriverError",
    "UninitializedSession",
    "EmulationWarning",
]
