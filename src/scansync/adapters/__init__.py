"""Digital line adapters.

Provides the adapter abstractions, the NI-DAQmx hardware adapters, the
emulated adapters and factory functions that pick one of them once, at
session init. When the hardware cannot be acquired the factories fall back
to emulation and raise a loud operator warning: a session that silently
emulates while a subject is in the scanner would record nothing real.

Example:
    >>> from scansync.adapters import create_input_adapter
    >>> from scansync.clock import SystemClock
    >>> from scansync.config import load_settings
    >>> adapter = create_input_adapter(load_settings(), repetition_interval=2.0, clock=SystemClock())
    >>> adapter.emulated
    True
"""

import logging
from typing import Optional
import warnings

from ..clock import Clock
from ..domain.config import Settings
from ..exceptions import DeviceUnavailable, EmulationWarning
from ..utils import warning_banner
from .base import InputAdapter, OutputAdapter
from .emulated import EmulatedInputAdapter, EmulatedOutputAdapter
from .keyboard import KeyStateSource, NullKeyboard, PynputKeyboard, create_keyboard
from .nidaq import NIDAQInputAdapter, NIDAQOutputAdapter, detect_devices

__all__ = [
    # Abstractions
    "InputAdapter",
    "OutputAdapter",
    # Hardware
    "NIDAQInputAdapter",
    "NIDAQOutputAdapter",
    "detect_devices",
    # Emulation
    "EmulatedInputAdapter",
    "EmulatedOutputAdapter",
    "KeyStateSource",
    "NullKeyboard",
    "PynputKeyboard",
    "create_keyboard",
    # Factories
    "create_input_adapter",
    "create_output_adapter",
    "warn_emulation",
]

logger = logging.getLogger(__name__)


def warn_emulation(kind: str, reason: str, detail: str = "") -> None:
    """Surface the fallback to emulation as loudly as possible.

    Logs a banner at WARNING level and issues an EmulationWarning.
    """
    lines = [f"NI CARD NOT AVAILABLE - entering {kind} emulation mode{detail}", f"reason: {reason}", "if you see this message in the scanner, DO NOT PROCEED"]
    logger.warning(warning_banner(*lines))
    warnings.warn(f"scansync {kind} session is emulated: {reason}", EmulationWarning, stacklevel=3)


def create_input_adapter(
    settings: Settings,
    repetition_interval: float,
    clock: Clock,
    keyboard: Optional[KeyStateSource] = None,
) -> InputAdapter:
    """Acquire the NI-DAQmx input adapter, or fall back to emulation.

    Args:
        settings: Validated settings (input lines, emulation knobs)
        repetition_interval: Trigger repetition interval for emulated pulses
        clock: Time source for the emulated pulse train
        keyboard: Key source for emulated buttons (default: pynput listener,
            closed with the session). A supplied source stays open.

    Returns:
        Input adapter for settings.input.lines
    """
    if settings.emulation.force:
        reason = "emulation forced by configuration"
    else:
        try:
            return NIDAQInputAdapter(settings.input.lines)
        except DeviceUnavailable as e:
            reason = str(e)

    warn_emulation("input", reason, detail=f" with tr={repetition_interval}")
    return EmulatedInputAdapter(
        channel_count=len(settings.input.lines),
        repetition_interval=repetition_interval,
        clock=clock,
        keyboard=keyboard if keyboard is not None else create_keyboard(),
        pulse_width_s=settings.emulation.pulse_width_s,
        keys=settings.emulation.keys,
        owns_keyboard=keyboard is None,
    )


def create_output_adapter(settings: Settings) -> OutputAdapter:
    """Acquire the NI-DAQmx output adapter, or fall back to a no-op emulation.

    Args:
        settings: Validated settings (output lines)

    Returns:
        Output adapter for settings.output.lines
    """
    if settings.emulation.force:
        reason = "emulation forced by configuration"
    else:
        try:
            return NIDAQOutputAdapter(settings.output.lines)
        except DeviceUnavailable as e:
            reason = str(e)

    warn_emulation("output", reason)
    return EmulatedOutputAdapter(channel_count=len(settings.output.lines))
