"""Scenario builders for synthetic line sessions.

Pre-configured sessions that wrap the synthetic line generators with
specific parameter combinations for common test cases:

- happy_path: Regular triggers plus a few clean button presses
- bouncy_buttons: Button presses whose contacts chatter on the way down
- no_trigger: Buttons only, the scanner never starts

Each scenario returns a LineSessionResult with the simulated clock, the
adapter to pass to ``ChannelMonitor.init`` and the scripted ground truth.

Example:
    >>> from synthetic.scenarios import happy_path
    >>> session = happy_path.make_session(n_volumes=5)
    >>> monitor = ChannelMonitor(clock=session.clock).init(session.repetition_interval, adapter=session.adapter)
"""

from . import bouncy_buttons, happy_path, no_trigger

__all__ = [
    "happy_path",
    "bouncy_buttons",
    "no_trigger",
]
