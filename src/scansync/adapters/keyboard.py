"""Keyboard state sources for the emulated input adapter.

The emulated adapter asks ``is_key_down(key)`` on every read. The default
source tracks the set of currently held keys with a ``pynput`` listener
thread. When pynput is not installed, or it cannot attach to a display,
``create_keyboard`` returns a source that reports no keys.
"""

import importlib.util
import logging
import threading
from typing import Optional, Protocol, Set

__all__ = ["KeyStateSource", "NullKeyboard", "PynputKeyboard", "create_keyboard", "key_for_channel"]

logger = logging.getLogger(__name__)


class KeyStateSource(Protocol):
    """Protocol for instantaneous key state queries."""

    def is_key_down(self, key: str) -> bool: ...

    def close(self) -> None: ...


class NullKeyboard:
    """Key source with no keys ever held."""

    def is_key_down(self, key: str) -> bool:
        return False

    def close(self) -> None:
        pass


class PynputKeyboard:
    """Key source backed by a pynput keyboard listener.

    Keys are tracked by their lower-case character, or by ``str(key)`` for
    special keys (``"Key.space"``).
    """

    def __init__(self):
        from pynput import keyboard

        self._pressed: Set[str] = set()
        self._lock = threading.Lock()
        self._listener = keyboard.Listener(on_press=self._on_press, on_release=self._on_release)
        self._listener.daemon = True
        self._listener.start()
        logger.debug("Keyboard listener started")

    @staticmethod
    def _key_name(key) -> str:
        char = getattr(key, "char", None)
        return (char if char else str(key)).lower()

    def _on_press(self, key) -> None:
        with self._lock:
            self._pressed.add(self._key_name(key))

    def _on_release(self, key) -> None:
        with self._lock:
            self._pressed.discard(self._key_name(key))

    def is_key_down(self, key: str) -> bool:
        with self._lock:
            return key.lower() in self._pressed

    def close(self) -> None:
        self._listener.stop()
        self._listener.join()
        logger.debug("Keyboard listener stopped")


def create_keyboard() -> KeyStateSource:
    """Return a pynput-backed key source, or a NullKeyboard if unavailable."""
    if importlib.util.find_spec("pynput") is None:
        logger.warning("pynput not available, emulated buttons disabled. Install: pip install 'scansync[keyboard]'")
        return NullKeyboard()

    try:
        return PynputKeyboard()
    except Exception as e:
        # pynput raises backend-specific errors (no X display, no uinput access)
        logger.warning(f"Keyboard listener unavailable, emulated buttons disabled: {e}")
        return NullKeyboard()


def key_for_channel(keys, channel: int) -> Optional[str]:
    """Key mapped to a button channel (1-based buttons after the trigger)."""
    if channel < 1 or channel > len(keys):
        return None
    return keys[channel - 1]
