"""Happy path scenario: regular triggers and clean button presses.

Configuration:
- Trigger on channel 0 every ``tr`` seconds, 6 ms wide, first at ``tr``
- One 300 ms press of button 1 halfway through every other volume
- No jitter, no contact bounce
"""

from synthetic import ButtonPress, LineSessionResult, PulseTrainOptions, build_scripted_session


def make_session(*, n_volumes: int = 10, tr: float = 2.0, seed: int = 42) -> LineSessionResult:
    """Generate a happy path session.

    Args:
        n_volumes: Number of trigger pulses
        tr: Repetition interval in seconds
        seed: Random seed for deterministic generation

    Returns:
        LineSessionResult with n_volumes triggers and n_volumes // 2 presses

    Example:
        >>> from synthetic.scenarios import happy_path
        >>> session = happy_path.make_session(n_volumes=4)
        >>> session.trigger_onsets
        [2.0, 4.0, 6.0, 8.0]
    """
    trigger = PulseTrainOptions(n_pulses=n_volumes, interval_s=tr, width_s=0.006, start_time_s=tr, seed=seed)
    presses = [ButtonPress(channel=1, down_s=tr * (v + 1.5), up_s=tr * (v + 1.5) + 0.3) for v in range(0, n_volumes - 1, 2)]
    return build_scripted_session(trigger=trigger, presses=presses)
