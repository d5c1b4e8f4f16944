#!/usr/bin/env python3
"""Example 01: Simulated Trial Loop.

Runs a block of response trials against the synthetic `happy_path`
scenario on a simulated clock, so it finishes instantly and gives the
same numbers on every run.

Key Concepts:
-------------
- Waiting for the first volume trigger with an unbounded deadline
- Per-trial response windows relative to the trigger time
- Waiting for the subject to release the button
- Dead-reckoned pulse numbers
- Sending an output pulse per response

Example Usage:
-------------
    $ python examples/01_simulated_trial_loop.py

    # Or with custom parameters
    $ N_VOLUMES=20 TR=1.5 python examples/01_simulated_trial_loop.py
"""

import math

from pydantic_settings import BaseSettings, SettingsConfigDict

from scansync import ChannelMonitor, TriggerSender
from scansync.adapters import EmulatedOutputAdapter
from scansync.utils import configure_logger
from synthetic.scenarios import happy_path


class ExampleSettings(BaseSettings):
    """Settings for Example 01: Simulated Trial Loop."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    n_volumes: int = 10
    tr: float = 2.0
    response_window_s: float = 4.0
    log_level: str = "WARNING"


def run_trials(settings: ExampleSettings) -> list:
    """Run one response trial per pair of volumes.

    Returns:
        List of (trial, response time, pulse number) tuples
    """
    configure_logger("scansync", level=settings.log_level)
    session = happy_path.make_session(n_volumes=settings.n_volumes, tr=settings.tr)

    print("=" * 80)
    print("scansync Example 01: Simulated Trial Loop")
    print("=" * 80)

    monitor = ChannelMonitor(clock=session.clock).init(session.repetition_interval, adapter=session.adapter)
    sender = TriggerSender().init(adapter=EmulatedOutputAdapter(1))

    results = []
    with monitor, sender:
        print("\nWaiting for the scanner...")
        start_time = monitor.wait_for([0], deadline=math.inf).event_times[0]
        print(f"   First trigger at {start_time:.4f} s")

        n_trials = settings.n_volumes // 2
        for trial in range(n_trials):
            onset = start_time + trial * 2 * settings.tr
            times, pulse, state = monitor.wait_for([1], deadline=onset + settings.response_window_s)
            if math.isnan(times[0]):
                print(f"   Trial {trial}: no response")
                results.append((trial, None, pulse))
                continue

            sender.send([1])
            sender.send([])
            monitor.wait_for([1], deadline=math.inf, release=True)
            print(f"   Trial {trial}: response at {times[0] - start_time:.3f} s after start (volume {pulse})")
            results.append((trial, times[0], pulse))

        final = monitor.state()
        print(f"\nTriggers counted: {final.event_count[0]}")
        print(f"Responses counted: {final.event_count[1]}")

    print("\n" + "=" * 80)
    print("Done")
    print("=" * 80)
    return results


if __name__ == "__main__":
    settings = ExampleSettings()
    run_trials(settings)
