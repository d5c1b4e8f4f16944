"""No trigger scenario: the scanner never starts.

Buttons are pressed but channel 0 never goes active, so a wait for the
trigger times out and the pulse estimate stays unset.
"""

from synthetic import ButtonPress, LineSessionResult, build_scripted_session


def make_session(*, tr: float = 2.0) -> LineSessionResult:
    """Generate a session with button presses and no trigger.

    Args:
        tr: Nominal repetition interval passed to the monitor

    Returns:
        LineSessionResult with presses on buttons 1 and 5
    """
    presses = [
        ButtonPress(channel=1, down_s=0.5, up_s=0.8),
        ButtonPress(channel=5, down_s=1.5, up_s=1.7),
    ]
    session = build_scripted_session(presses=presses)
    return LineSessionResult(clock=session.clock, adapter=session.adapter, repetition_interval=tr, presses=session.presses)
