"""Domain models for scansync.

Pydantic models for settings and for snapshots of monitor state. All
models are frozen and reject unknown fields.

Package Structure:
-----------------
- config: Settings models (Settings, InputConfig, OutputConfig, ...)
- state: Snapshot models (ChannelState, WaitResult)

Import Patterns:
---------------
from scansync.domain.config import Settings, InputConfig
from scansync.domain import ChannelState, WaitResult
"""

from scansync.domain.config import (
    DEFAULT_EMULATION_KEYS,
    DEFAULT_INPUT_LINES,
    DEFAULT_OUTPUT_LINES,
    EmulationConfig,
    InputConfig,
    LoggingConfig,
    OutputConfig,
    Settings,
)
from scansync.domain.state import ChannelState, WaitResult

__all__ = [
    # Configuration
    "DEFAULT_INPUT_LINES",
    "DEFAULT_OUTPUT_LINES",
    "DEFAULT_EMULATION_KEYS",
    "Settings",
    "InputConfig",
    "EmulationConfig",
    "OutputConfig",
    "LoggingConfig",
    # State snapshots
    "ChannelState",
    "WaitResult",
]
