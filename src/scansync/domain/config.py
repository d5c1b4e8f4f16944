"""Configuration domain models for scansync.

Pydantic models for the settings loaded by ``scansync.config``. Defaults
describe the scanner interface box: nine input lines (one acquisition
trigger plus eight buttons) and a single output line.

Model Hierarchy:
---------------
- Settings (top-level)
  ├── InputConfig
  ├── EmulationConfig
  ├── OutputConfig
  └── LoggingConfig

Usage:
------
>>> from scansync.domain import Settings
>>> settings = Settings()
>>> settings.input.lines[0]
'Dev1/port0/line0'
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

__all__ = [
    "DEFAULT_INPUT_LINES",
    "DEFAULT_OUTPUT_LINES",
    "DEFAULT_EMULATION_KEYS",
    "InputConfig",
    "EmulationConfig",
    "OutputConfig",
    "LoggingConfig",
    "Settings",
]

# Trigger on port0/line0, buttons 1-4 on port0/line1-4, buttons 5-8 on
# port0/line5-7 and port1/line0
DEFAULT_INPUT_LINES = [
    "Dev1/port0/line0",
    "Dev1/port0/line1",
    "Dev1/port0/line2",
    "Dev1/port0/line3",
    "Dev1/port0/line4",
    "Dev1/port0/line5",
    "Dev1/port0/line6",
    "Dev1/port0/line7",
    "Dev1/port1/line0",
]

DEFAULT_OUTPUT_LINES = ["Dev1/port2/line7"]

# Right hand buttons on v,b,n,m and left hand buttons on f,d,s,a
DEFAULT_EMULATION_KEYS = ["v", "b", "n", "m", "f", "d", "s", "a"]

TRIGGER_MIN_INTERVAL_S = 0.006
BUTTON_MIN_INTERVAL_S = 0.2


def _default_min_intervals() -> List[float]:
    return [TRIGGER_MIN_INTERVAL_S] + [BUTTON_MIN_INTERVAL_S] * (len(DEFAULT_INPUT_LINES) - 1)


class InputConfig(BaseModel):
    """Digital input (channel monitor) configuration.

    Attributes:
        lines: Physical line names, channel 0 first (the acquisition trigger)
        debounce_policy: "edge" counts inactive->active transitions,
            "duration" counts any active sample spaced by min_interval_s
        min_interval_s: Per-channel minimum spacing between counted events.
            None disables the guard (edge policy only)
        poll_interval_s: Sleep between polls while waiting
        min_pulse_width_s: Shortest pulse the monitor must never miss
        repetition_interval_s: Default repetition interval for scripts and CLI
    """

    model_config = {"frozen": True, "extra": "forbid"}

    lines: List[str] = Field(default_factory=lambda: list(DEFAULT_INPUT_LINES), min_length=1, description="Physical input line names")
    debounce_policy: Literal["edge", "duration"] = Field(default="edge", description="Event counting policy: 'edge' | 'duration'")
    min_interval_s: Optional[List[float]] = Field(default_factory=_default_min_intervals, description="Per-channel minimum interval between counted events")
    poll_interval_s: float = Field(default=0.002, gt=0, description="Sleep quantum between polls in seconds")
    min_pulse_width_s: float = Field(default=0.006, gt=0, description="Shortest pulse width that must be observed")
    repetition_interval_s: Optional[float] = Field(default=None, gt=0, description="Default repetition interval (TR) in seconds")

    @field_validator("min_interval_s")
    @classmethod
    def validate_min_interval(cls, v: Optional[List[float]]) -> Optional[List[float]]:
        """Reject negative intervals."""
        if v is not None and any(x < 0 for x in v):
            raise ValueError(f"min_interval_s must be non-negative, got {v}")
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "InputConfig":
        """Cross-field checks: interval count, policy requirements, poll quantum."""
        if self.min_interval_s is not None and len(self.min_interval_s) != len(self.lines):
            raise ValueError(f"min_interval_s has {len(self.min_interval_s)} entries but {len(self.lines)} lines are configured")
        if self.debounce_policy == "duration" and self.min_interval_s is None:
            raise ValueError("debounce_policy='duration' requires min_interval_s")
        if self.poll_interval_s >= self.min_pulse_width_s:
            raise ValueError(f"poll_interval_s ({self.poll_interval_s}) must be shorter than min_pulse_width_s ({self.min_pulse_width_s})")
        return self


class EmulationConfig(BaseModel):
    """Emulated adapter configuration.

    Attributes:
        pulse_width_s: Width of each emulated trigger pulse
        keys: Keyboard keys mapped to button channels 1..N-1
        force: Skip hardware detection and always emulate
    """

    model_config = {"frozen": True, "extra": "forbid"}

    pulse_width_s: float = Field(default=0.006, gt=0, description="Emulated trigger pulse width in seconds")
    keys: List[str] = Field(default_factory=lambda: list(DEFAULT_EMULATION_KEYS), description="Keys mapped to button channels")
    force: bool = Field(default=False, description="Always use the emulated adapter")


class OutputConfig(BaseModel):
    """Digital output (trigger sender) configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    lines: List[str] = Field(default_factory=lambda: list(DEFAULT_OUTPUT_LINES), min_length=1, description="Physical output line names")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    level: str = Field(default="INFO")
    structured: bool = Field(default=False)

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}, got '{v}'")
        return v_upper


class Settings(BaseModel):
    """Complete scansync settings."""

    model_config = {"frozen": True, "extra": "forbid"}

    input: InputConfig = Field(default_factory=InputConfig)
    emulation: EmulationConfig = Field(default_factory=EmulationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
