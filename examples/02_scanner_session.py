#!/usr/bin/env python3
"""Example 02: Scanner Session.

Waits for the scanner to start, then logs every trigger and button press
for a fixed number of volumes, sending an output pulse on every button
press. Runs on the NI card when one is present; otherwise it emulates the
trigger and maps buttons to the keyboard (v,b,n,m,f,d,s,a).

Key Concepts:
-------------
- Settings from TOML plus SCANSYNC_* environment overrides
- Hardware detection with a loud fallback to emulation
- Polling every line by hand between volume boundaries

Example Usage:
-------------
    $ python examples/02_scanner_session.py

    # Or with custom parameters
    $ TR=1.5 N_VOLUMES=30 CONFIG=scansync.toml python examples/02_scanner_session.py
"""

import math
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from scansync import ChannelMonitor, TriggerSender, load_settings
from scansync.utils import configure_logger


class ExampleSettings(BaseSettings):
    """Settings for Example 02: Scanner Session."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    config: Optional[Path] = None
    tr: float = 2.0
    n_volumes: int = 10


def run_session(example: ExampleSettings) -> list:
    """Log events volume by volume.

    Returns:
        Per-volume list of (channel, time) events
    """
    settings = load_settings(example.config)
    configure_logger("scansync", level=settings.logging.level, structured=settings.logging.structured)

    print("=" * 80)
    print("scansync Example 02: Scanner Session")
    print("=" * 80)

    volumes = []
    with ChannelMonitor(settings=settings).init(example.tr) as monitor, TriggerSender(settings=settings).init() as sender:
        print(f"\nInput: {'EMULATED' if monitor.emulating else 'hardware'}, output: {'EMULATED' if sender.emulating else 'hardware'}")
        print("Waiting for the scanner...")
        start_time = monitor.wait_for([0], deadline=math.inf).event_times[0]

        for volume in range(example.n_volumes):
            deadline = start_time + (volume + 1) * example.tr
            events = []
            while monitor.clock.now() < deadline:
                state = monitor.poll()
                fired = state.fired()
                events.extend((channel, state.current_event_time[channel]) for channel in fired)
                if any(channel > 0 for channel in fired):
                    sender.send([1])
                    sender.send([])
                monitor.clock.sleep(settings.input.poll_interval_s)
            volumes.append(events)
            buttons = [f"{c}@{t - start_time:.3f}" for c, t in events if c > 0]
            print(f"   Volume {volume}: {len(events)} event(s) {' '.join(buttons)}")

        print(f"\nEvent counts: {monitor.state().event_count}")

    return volumes


if __name__ == "__main__":
    example = ExampleSettings()
    run_session(example)
