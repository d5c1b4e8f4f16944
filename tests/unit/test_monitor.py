"""Unit tests for the channel monitor.

Covers event counting (first sample, edges, held lines, guard interval,
duration policy), bounded waits, release waits, the pulse estimate and the
session lifecycle.
"""

import logging
import math
from unittest.mock import MagicMock

import numpy as np
import pytest

from scansync.adapters import EmulatedInputAdapter, NullKeyboard
from scansync.exceptions import DriverError, InvalidParameter, UninitializedSession
from scansync.monitor import ChannelMonitor
from synthetic import ScriptedInputAdapter, ScriptedKeyboard, SequenceInputAdapter, SimulatedClock

pytestmark = pytest.mark.unit

T, F = True, False


class TestInit:
    """Test session initialisation and validation."""

    @pytest.mark.parametrize("tr", [0, -1.0, math.nan, math.inf, "2", True, None, [2.0]])
    def test_Should_RejectRepetitionInterval_When_NotFinitePositiveScalar(self, tr, sim_clock):
        """Repetition interval must be a finite, positive scalar."""
        monitor = ChannelMonitor(clock=sim_clock)

        with pytest.raises(InvalidParameter):
            monitor.init(tr, adapter=SequenceInputAdapter([[F, F, F]]))

        assert not monitor.initialized

    def test_Should_AcceptIntegerInterval_When_Positive(self, sequence_monitor):
        monitor = sequence_monitor([[F, F, F]], repetition_interval=2)

        assert monitor.repetition_interval == 2.0
        assert monitor.channel_count == 3

    def test_Should_StartWithEmptyHistory_When_Initialised(self, sequence_monitor):
        # Arrange & Act
        state = sequence_monitor([[F, F, F]]).state()

        # Assert
        assert all(math.isnan(t) for t in state.first_event_time)
        assert all(math.isnan(t) for t in state.last_event_time)
        assert all(math.isnan(t) for t in state.current_event_time)
        assert state.previous_level == [False, False, False]
        assert state.event_count == [0, 0, 0]
        assert state.poll_count == 0

    def test_Should_CloseOldAdapter_When_Reinitialised(self, sim_clock, settings_factory):
        # Arrange
        first = SequenceInputAdapter([[T, F, F]])
        second = SequenceInputAdapter([[F, F, F]])
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=first)
        monitor.poll()

        # Act
        monitor.init(3.0, adapter=second)

        # Assert
        assert first.closed
        assert not second.closed
        assert monitor.adapter is second
        assert monitor.repetition_interval == 3.0
        assert monitor.state().event_count == [0, 0, 0]

    def test_Should_RejectAndClose_When_MinIntervalLengthMismatchesAdapter(self, sim_clock, settings_factory):
        # Arrange - settings for three lines, adapter with two
        settings = settings_factory(min_interval_s=[0.006, 0.2, 0.2])
        adapter = SequenceInputAdapter([[F, F]])
        monitor = ChannelMonitor(settings=settings, clock=sim_clock)

        # Act & Assert
        with pytest.raises(InvalidParameter, match="min_interval_s"):
            monitor.init(2.0, adapter=adapter)
        assert adapter.closed
        assert not monitor.initialized

    def test_Should_FallBackToEmulation_When_NoDeviceDetected(self, sim_clock, monkeypatch):
        """Missing hardware yields an emulated session plus a loud warning."""
        from scansync.exceptions import EmulationWarning

        monkeypatch.setattr("scansync.adapters.nidaq.detect_devices", lambda: [])
        monitor = ChannelMonitor(clock=sim_clock, keyboard=NullKeyboard())

        with pytest.warns(EmulationWarning):
            monitor.init(2.0)

        assert monitor.emulating
        assert isinstance(monitor.adapter, EmulatedInputAdapter)
        assert monitor.channel_count == 9

    def test_Should_KeepSuppliedKeyboardOpen_When_EmulatedSessionReinitialised(self, sim_clock, settings_factory):
        """A keyboard passed in by the caller survives session resets."""
        from scansync.exceptions import EmulationWarning

        # Arrange
        keyboard = ScriptedKeyboard(sim_clock, {"v": [(1.0, 1.3)]})
        monitor = ChannelMonitor(settings=settings_factory(force_emulation=True), clock=sim_clock, keyboard=keyboard)

        # Act
        with pytest.warns(EmulationWarning):
            monitor.init(2.0)
            monitor.init(2.0)
        monitor.poll()
        sim_clock.set(1.1)
        state = monitor.poll()

        # Assert
        assert not keyboard.closed
        assert 1 in state.fired()
        assert state.event_count[1] == 1

        monitor.stop()
        assert not keyboard.closed


class TestLifecycle:
    """Test reset, stop and context manager behaviour."""

    def test_Should_RaiseUninitialized_When_PolledBeforeInit(self):
        monitor = ChannelMonitor()

        with pytest.raises(UninitializedSession):
            monitor.poll()
        with pytest.raises(UninitializedSession):
            monitor.wait_for([0], deadline=0.0)
        with pytest.raises(UninitializedSession):
            monitor.estimated_pulse_number()

    def test_Should_ReturnFalse_When_StoppedTwice(self, sequence_monitor, caplog):
        # Arrange
        monitor = sequence_monitor([[F, F, F]])
        adapter = monitor.adapter

        # Act
        first = monitor.stop()
        with caplog.at_level(logging.WARNING, logger="scansync.monitor"):
            second = monitor.stop()

        # Assert
        assert first is True
        assert second is False
        assert adapter.closed
        assert "nothing to stop" in caplog.text

    def test_Should_ReleaseSession_When_ContextExits(self, sequence_monitor):
        monitor = sequence_monitor([[F, F, F]])
        adapter = monitor.adapter

        with monitor as m:
            m.poll()

        assert not monitor.initialized
        assert adapter.closed

    def test_Should_AllowReinit_When_Reset(self, sim_clock, settings_factory):
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=SequenceInputAdapter([[F, F, F]]))
        monitor.reset()

        monitor.init(2.0, adapter=SequenceInputAdapter([[T, F, F]]))
        state = monitor.poll()

        assert state.event_count == [1, 0, 0]


class TestPoll:
    """Test per-poll event counting."""

    def test_Should_CountFirstActiveSample_When_NoPriorInactiveSample(self, sequence_monitor, sim_clock):
        """A line active on the very first poll is counted and timestamped."""
        # Arrange
        monitor = sequence_monitor([[T, F, F]])
        sim_clock.set(1.5)

        # Act
        state = monitor.poll()

        # Assert
        assert state.first_event_time[0] == 1.5
        assert state.last_event_time[0] == 1.5
        assert state.current_event_time[0] == 1.5
        assert state.event_count == [1, 0, 0]
        assert state.fired() == [0]

    def test_Should_NotRecount_When_LineHeld(self, sequence_monitor, sim_clock):
        # Arrange
        monitor = sequence_monitor([[T, F, F], [T, F, F], [T, F, F]])

        # Act
        counts = []
        for t in (0.0, 1.0, 2.0):
            sim_clock.set(t)
            counts.append(monitor.poll().event_count[0])

        # Assert
        assert counts == [1, 1, 1]
        assert monitor.state().last_event_time[0] == 0.0

    def test_Should_ClearCurrentEventTime_When_NextPollStarts(self, sequence_monitor, sim_clock):
        monitor = sequence_monitor([[T, T, F], [T, F, F]])
        monitor.poll()

        sim_clock.set(0.5)
        state = monitor.poll()

        assert all(math.isnan(t) for t in state.current_event_time)
        assert state.fired() == []

    def test_Should_CountRisingEdge_When_LineReleasedAndPressedAgain(self, sequence_monitor, sim_clock):
        # Arrange
        monitor = sequence_monitor([[F, T, F], [F, F, F], [F, T, F]])

        # Act
        for t in (1.0, 2.0, 3.0):
            sim_clock.set(t)
            state = monitor.poll()

        # Assert
        assert state.event_count == [0, 2, 0]
        assert state.first_event_time[1] == 1.0
        assert state.last_event_time[1] == 3.0
        assert state.current_event_time[1] == 3.0

    def test_Should_SuppressBounce_When_EdgeWithinGuardInterval(self, sequence_monitor, sim_clock, settings_factory):
        """A second edge inside the per-channel guard interval is not counted."""
        # Arrange
        settings = settings_factory(min_interval_s=[0.006, 0.2, 0.2])
        monitor = sequence_monitor([[F, T, F], [F, F, F], [F, T, F], [F, F, F], [F, T, F]], settings=settings)

        # Act
        for t in (0.0, 0.01, 0.02, 0.03, 0.5):
            sim_clock.set(t)
            monitor.poll()

        # Assert
        state = monitor.state()
        assert state.event_count[1] == 2
        assert state.last_event_time[1] == 0.5

    def test_Should_CountEdge_When_GuardIntervalExactlyElapsed(self, sequence_monitor, sim_clock, settings_factory):
        settings = settings_factory(min_interval_s=[0.5, 0.5, 0.5])
        monitor = sequence_monitor([[T, F, F], [F, F, F], [T, F, F]], settings=settings)

        for t in (0.0, 0.25, 0.5):
            sim_clock.set(t)
            monitor.poll()

        assert monitor.state().event_count[0] == 2

    def test_Should_RecountHeldLine_When_DurationPolicyIntervalElapsed(self, sequence_monitor, sim_clock, settings_factory):
        """The duration policy counts a held line again once per interval."""
        # Arrange
        settings = settings_factory(min_interval_s=[0.006, 0.2, 0.2], debounce_policy="duration")
        monitor = sequence_monitor([[F, T, F]], settings=settings)

        # Act
        fired_at = []
        for t in (0.0, 0.1, 0.25, 0.3, 0.5):
            sim_clock.set(t)
            if 1 in monitor.poll().fired():
                fired_at.append(t)

        # Assert
        assert fired_at == [0.0, 0.25, 0.5]
        assert monitor.state().event_count[1] == 3

    def test_Should_TrackPreviousLevel_When_Polled(self, sequence_monitor):
        monitor = sequence_monitor([[T, F, T]])

        state = monitor.poll()

        assert state.previous_level == [True, False, True]
        assert state.poll_count == 1

    def test_Should_RaiseDriverError_When_AdapterReturnsWrongShape(self, sim_clock, settings_factory):
        # Arrange
        adapter = MagicMock()
        adapter.channel_count = 3
        adapter.emulated = False
        adapter.read.return_value = np.ones(2, dtype=bool)
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        # Act & Assert
        with pytest.raises(DriverError):
            monitor.poll()


class TestWaitFor:
    """Test bounded waits."""

    def test_Should_PollExactlyOnce_When_DeadlineInPast(self, sequence_monitor, sim_clock):
        # Arrange
        monitor = sequence_monitor([[F, F, F]])
        sim_clock.set(10.0)

        # Act
        result = monitor.wait_for([0], deadline=5.0)

        # Assert
        assert result.state.poll_count == 1
        assert sim_clock.sleeps == []
        assert result.timed_out

    @pytest.mark.parametrize("deadline", [None, math.nan])
    def test_Should_PollOnce_When_DeadlineUnset(self, sequence_monitor, sim_clock, deadline):
        sim_clock.set(1.0)
        monitor = sequence_monitor([[F, F, F]])

        result = monitor.wait_for([1], deadline=deadline)

        assert result.state.poll_count == 1

    def test_Should_Reject_When_NoChannelsAndInfiniteDeadline(self, sequence_monitor):
        monitor = sequence_monitor([[F, F, F]])

        with pytest.raises(InvalidParameter):
            monitor.wait_for([], deadline=math.inf)

    @pytest.mark.parametrize("channels", [[3], [-1], [True], [1.0], ["1"]])
    def test_Should_Reject_When_ChannelIndexInvalid(self, sequence_monitor, channels):
        monitor = sequence_monitor([[F, F, F]])

        with pytest.raises(InvalidParameter):
            monitor.wait_for(channels, deadline=0.0)

    def test_Should_AcceptSingleChannel_When_GivenAsInt(self, sequence_monitor):
        monitor = sequence_monitor([[F, T, F]])

        result = monitor.wait_for(1, deadline=0.0)

        assert len(result.event_times) == 1
        assert not math.isnan(result.event_times[0])

    def test_Should_ReturnAtEvent_When_RequestedChannelFires(self, sim_clock, settings_factory):
        # Arrange - button 1 pressed from 1.0 s to 1.3 s
        adapter = ScriptedInputAdapter(3, sim_clock, {1: [(1.0, 1.3)]})
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        # Act
        event_time, = monitor.wait_for([1], deadline=5.0).event_times

        # Assert
        assert 1.0 <= event_time < 1.0 + 2 * monitor.settings.input.poll_interval_s
        assert sim_clock.now() == event_time
        assert monitor.state().event_count[1] == 1

    def test_Should_IgnoreOtherChannels_When_Waiting(self, sim_clock, settings_factory):
        adapter = ScriptedInputAdapter(3, sim_clock, {2: [(0.1, 0.2)], 1: [(0.5, 0.6)]})
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        result = monitor.wait_for([1], deadline=5.0)

        assert result.event_times[0] >= 0.5
        assert result.state.event_count == [0, 1, 1]

    def test_Should_TimeOut_When_NothingFires(self, sim_clock, settings_factory):
        # Arrange
        adapter = ScriptedInputAdapter(3, sim_clock)
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        # Act
        result = monitor.wait_for([1, 2], deadline=0.5)

        # Assert
        assert result.timed_out
        assert all(math.isnan(t) for t in result.event_times)
        assert 0.5 <= sim_clock.now() < 0.5 + 2 * monitor.settings.input.poll_interval_s
        assert result.pulse_number is None

    def test_Should_ReturnAtRelease_When_ButtonReleasedBeforeDeadline(self, sim_clock, settings_factory):
        """Release wait returns at the release time, not at the deadline."""
        # Arrange - held until 0.05 s before the deadline
        deadline = 3.0
        adapter = ScriptedInputAdapter(3, sim_clock, {1: [(0.0, deadline - 0.05)]})
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        # Act
        result = monitor.wait_for([1], deadline=deadline, release=True)

        # Assert
        released_at = sim_clock.now()
        assert deadline - 0.05 <= released_at < deadline - 0.05 + 2 * monitor.settings.input.poll_interval_s
        assert released_at < deadline
        assert result.state.previous_level[1] is False

    def test_Should_ReturnImmediately_When_ReleaseWaitOnIdleChannel(self, sequence_monitor):
        monitor = sequence_monitor([[F, F, F]])

        result = monitor.wait_for([1], deadline=10.0, release=True)

        assert result.state.poll_count == 1

    def test_Should_LogAllEventsUntilDeadline_When_NoChannelsGiven(self, sim_clock, settings_factory):
        adapter = ScriptedInputAdapter(3, sim_clock, {1: [(0.1, 0.2)], 2: [(0.3, 0.4)]})
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        result = monitor.wait_for([], deadline=0.5)

        assert result.event_times == []
        assert result.state.event_count == [0, 1, 1]
        assert sim_clock.now() >= 0.5


class TestPulseEstimate:
    """Test dead-reckoned pulse numbers."""

    def test_Should_ReturnNone_When_NoTriggerYet(self, sequence_monitor):
        monitor = sequence_monitor([[F, T, F]])
        monitor.poll()

        assert monitor.estimated_pulse_number() is None

    def test_Should_MatchEmulatedScenario_When_TriggerAt2003(self, sim_clock):
        """First poll inactive; poll at 2.003 s counts the trigger; pulse at 5.0 s is 1."""
        # Arrange
        adapter = EmulatedInputAdapter(9, repetition_interval=2.0, clock=sim_clock, keyboard=NullKeyboard())
        monitor = ChannelMonitor(clock=sim_clock).init(2.0, adapter=adapter)

        # Act
        first = monitor.poll()
        sim_clock.set(2.003)
        second = monitor.poll()

        # Assert
        assert first.event_count == [0] * 9
        assert second.fired() == [0]
        assert second.first_event_time[0] == 2.003
        assert second.event_count[0] == 1
        assert monitor.estimated_pulse_number(5.0) == 1

        sim_clock.set(5.0)
        assert monitor.estimated_pulse_number() == 1

    def test_Should_ReportPulseNumber_When_WaitReturns(self, sim_clock, settings_factory):
        adapter = ScriptedInputAdapter(3, sim_clock, {0: [(1.0, 1.006)], 1: [(6.5, 6.8)]})
        monitor = ChannelMonitor(settings=settings_factory(), clock=sim_clock).init(2.0, adapter=adapter)

        monitor.wait_for([0], deadline=math.inf)
        times, pulse, state = monitor.wait_for([1], deadline=10.0)

        assert pulse == 2
        assert state.first_event_time[0] >= 1.0
