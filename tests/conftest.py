"""Pytest configuration and shared fixtures for scansync tests.

Provides:
- Environment isolation from SCANSYNC_* overrides
- Settings builders for small line groups
- Simulated clock and keyboard fixtures
- Monitor factories over scripted adapters
"""

from typing import List, Optional

import pytest

from scansync.adapters import NullKeyboard
from scansync.domain.config import EmulationConfig, InputConfig, OutputConfig, Settings
from scansync.monitor import ChannelMonitor
from synthetic import SequenceInputAdapter, SimulatedClock

THREE_LINES = ["Dev1/port0/line0", "Dev1/port0/line1", "Dev1/port0/line2"]


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    """Drop SCANSYNC_* variables so that host settings never leak into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SCANSYNC_"):
            monkeypatch.delenv(key)


# ============================================================================
# Settings
# ============================================================================


def make_settings(
    lines: Optional[List[str]] = None,
    min_interval_s: Optional[List[float]] = None,
    debounce_policy: str = "edge",
    force_emulation: bool = False,
    output_lines: Optional[List[str]] = None,
    **input_overrides,
) -> Settings:
    """Build settings for a small line group (no guard unless given)."""
    return Settings(
        input=InputConfig(
            lines=lines or list(THREE_LINES),
            min_interval_s=min_interval_s,
            debounce_policy=debounce_policy,
            **input_overrides,
        ),
        emulation=EmulationConfig(force=force_emulation),
        output=OutputConfig(lines=output_lines or ["Dev1/port2/line7"]),
    )


@pytest.fixture
def settings_factory():
    """Factory for settings over a small line group."""
    return make_settings


@pytest.fixture
def emulated_settings() -> Settings:
    """Default nine-line settings with hardware detection skipped."""
    return Settings(emulation=EmulationConfig(force=True))


# ============================================================================
# Clock, keyboard, monitors
# ============================================================================


@pytest.fixture
def sim_clock() -> SimulatedClock:
    return SimulatedClock()


@pytest.fixture
def null_keyboard() -> NullKeyboard:
    return NullKeyboard()


@pytest.fixture
def sequence_monitor(sim_clock):
    """Factory: monitor over a SequenceInputAdapter replaying active levels.

    The adapter consumes one row per poll; moving the clock is up to the test.
    """

    def _make(rows, settings: Optional[Settings] = None, repetition_interval: float = 2.0) -> ChannelMonitor:
        adapter = SequenceInputAdapter(rows)
        if settings is None:
            settings = make_settings(lines=[f"Dev1/port0/line{i}" for i in range(adapter.channel_count)])
        return ChannelMonitor(settings=settings, clock=sim_clock).init(repetition_interval, adapter=adapter)

    return _make


# ============================================================================
# Markers
# ============================================================================


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "integration: marks tests as integration tests (scenario sessions)")
    config.addinivalue_line("markers", "unit: marks tests as fast unit tests")
    config.addinivalue_line("markers", "property: marks seeded property tests over random line sequences")
