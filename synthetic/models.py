"""Data models for synthetic line sessions.

Models:
-------
- ButtonPress: One press of a response button, on a channel or a key

Design Principles:
------------------
- Use Pydantic for validation and type safety
- Immutable models (frozen=True)
"""

from typing import Optional

from pydantic import BaseModel, Field, model_validator


class ButtonPress(BaseModel):
    """A button held between two clock times.

    Attributes:
        channel: Button channel (1..N-1; 0 is the trigger)
        down_s: Time the button goes down
        up_s: Time the button is released
        key: Keyboard key to use instead of the channel's default key
    """

    model_config = {"frozen": True, "extra": "forbid"}

    channel: int = Field(..., ge=1, description="Button channel, 1-based after the trigger")
    down_s: float = Field(..., ge=0, description="Press time in seconds")
    up_s: float = Field(..., description="Release time in seconds")
    key: Optional[str] = Field(None, description="Override key for keyboard-driven sessions")

    @model_validator(mode="after")
    def validate_order(self) -> "ButtonPress":
        """Release must come after the press."""
        if self.up_s <= self.down_s:
            raise ValueError(f"up_s ({self.up_s}) must be after down_s ({self.down_s})")
        return self

    @property
    def interval(self):
        return (self.down_s, self.up_s)
