"""Bouncy buttons scenario: contacts chatter before settling.

Every press on button 2 starts with ``bounce_count`` 1 ms activations
separated by 1 ms gaps, then holds for the rest of the press. Polled every
millisecond, a bare edge detector sees ``bounce_count + 1`` edges per press;
the 200 ms button guard collapses them to one.

Configuration:
- No trigger
- ``n_presses`` presses of button 2, one per second starting at 1 s
- Each press lasts 150 ms
"""

from synthetic import ButtonPress, LineSessionResult, PulseTrainOptions, build_scripted_session, generate_pulse_intervals


def make_session(*, n_presses: int = 3, bounce_count: int = 2, seed: int = 7) -> LineSessionResult:
    """Generate a session with bouncing button contacts.

    Args:
        n_presses: Number of presses on button 2
        bounce_count: Spurious activations before each press settles
        seed: Random seed for deterministic generation

    Returns:
        LineSessionResult; ``presses`` lists the settled presses
    """
    options = PulseTrainOptions(
        n_pulses=n_presses,
        interval_s=1.0,
        width_s=0.15,
        start_time_s=1.0,
        bounce_count=bounce_count,
        bounce_gap_s=0.001,
        seed=seed,
    )
    session = build_scripted_session()
    session.adapter.hold(2, generate_pulse_intervals(options, channel=2))
    presses = [ButtonPress(channel=2, down_s=1.0 + i, up_s=1.15 + i) for i in range(n_presses)]
    return LineSessionResult(clock=session.clock, adapter=session.adapter, repetition_interval=session.repetition_interval, presses=presses)
