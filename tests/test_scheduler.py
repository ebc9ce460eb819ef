"""Unit tests for scheduler.py."""

import pytest
from pomocycle.durations import UserPreferences
from pomocycle.scheduler import SessionState, StageMachine, Transition
from pomocycle.stages import Stage


def complete(machine, stages):
    """Expire intervals, asserting the stage reached after each."""
    for expected in stages:
        assert machine.on_expire().stage == expected


class TestStageMachineBasics:
    """Test initial state and start."""

    def test_initial_state(self):
        """Machine starts not started with no completed work."""
        machine = StageMachine()
        assert machine.stage == Stage.NOT_STARTED
        assert machine.completed_work_count == 0
        assert machine.long_break_threshold == 2
        assert machine.is_active is False
        assert machine.seconds == 1500
        assert machine.title == "Time to grind"

    def test_start_enters_work(self):
        """Start moves to work and returns its duration."""
        machine = StageMachine(UserPreferences(work=1200))
        transition = machine.start()
        assert transition == Transition(
            previous=Stage.NOT_STARTED,
            stage=Stage.WORK,
            seconds=1200,
            title="Time to grind",
            completed_work_count=0,
        )
        assert machine.is_active is True

    def test_start_when_active_is_noop(self):
        """Start on an active session leaves the state alone."""
        machine = StageMachine()
        machine.start()
        machine.on_expire()
        transition = machine.start()
        assert machine.stage == Stage.SHORT_BREAK
        assert transition.stage == Stage.SHORT_BREAK
        assert transition.previous == Stage.SHORT_BREAK
        assert machine.completed_work_count == 1

    def test_expire_when_not_started_is_ignored(self):
        """A stale expiry before start changes nothing."""
        machine = StageMachine()
        transition = machine.on_expire()
        assert transition.stage == Stage.NOT_STARTED
        assert machine.state == SessionState()

    @pytest.mark.parametrize("threshold", [0, -1])
    def test_invalid_threshold(self, threshold):
        """Threshold must be at least one."""
        with pytest.raises(ValueError):
            StageMachine(long_break_threshold=threshold)


class TestTransitions:
    """Test the transition table."""

    def test_default_threshold_scenario(self):
        """Work, short break, work, long break, back to not started."""
        machine = StageMachine()
        machine.start()

        t = machine.on_expire()
        assert (t.stage, t.completed_work_count, t.seconds) == (Stage.SHORT_BREAK, 1, 300)

        t = machine.on_expire()
        assert (t.stage, t.completed_work_count, t.seconds) == (Stage.WORK, 1, 1500)

        t = machine.on_expire()
        assert (t.stage, t.completed_work_count, t.seconds) == (Stage.LONG_BREAK, 0, 900)

        t = machine.on_expire()
        assert (t.stage, t.completed_work_count, t.seconds) == (Stage.NOT_STARTED, 0, 1500)
        assert machine.is_active is False

    def test_threshold_compares_after_increment(self):
        """Threshold N gives exactly N work intervals per long break."""
        machine = StageMachine(long_break_threshold=4)
        machine.start()
        complete(machine, [Stage.SHORT_BREAK, Stage.WORK] * 3)
        assert machine.completed_work_count == 3
        complete(machine, [Stage.LONG_BREAK])
        assert machine.completed_work_count == 0

    def test_threshold_one_never_short_breaks(self):
        """With threshold 1 every work interval ends in a long break."""
        machine = StageMachine(long_break_threshold=1)
        for _ in range(3):
            machine.start()
            complete(machine, [Stage.LONG_BREAK, Stage.NOT_STARTED])

    def test_titles_follow_stage(self):
        """Each transition carries the fixed title for its stage."""
        machine = StageMachine()
        assert machine.start().title == "Time to grind"
        assert machine.on_expire().title == "Nice! Time for a short break"
        assert machine.on_expire().title == "Time to grind"
        assert machine.on_expire().title == "Good job! Time for a long break"

    def test_transition_durations_use_preferences(self):
        """Transitions resolve durations with overrides and fallbacks."""
        prefs = UserPreferences(work=0, short_break=999999, long_break=600)
        machine = StageMachine(prefs)
        assert machine.start().seconds == 1500
        assert machine.on_expire().seconds == 300
        machine.on_expire()
        assert machine.on_expire().seconds == 600

    @pytest.mark.parametrize("threshold", [1, 2, 3, 5])
    def test_long_cycle_properties(self, threshold):
        """Stages follow the cycle and the count stays in range."""
        machine = StageMachine(long_break_threshold=threshold)
        allowed_next = {
            Stage.NOT_STARTED: {Stage.WORK},
            Stage.WORK: {Stage.SHORT_BREAK, Stage.LONG_BREAK},
            Stage.SHORT_BREAK: {Stage.WORK},
            Stage.LONG_BREAK: {Stage.NOT_STARTED},
        }
        for _ in range(200):
            before = machine.stage
            if before == Stage.NOT_STARTED:
                t = machine.start()
            else:
                t = machine.on_expire()
            assert t.stage in allowed_next[before]
            assert 0 <= machine.completed_work_count <= threshold
            if t.stage == Stage.LONG_BREAK:
                assert machine.completed_work_count == 0


class TestPreferencesAndReset:
    """Test preference updates and reset."""

    def test_update_preferences_returns_current_duration(self):
        """Updating preferences returns the new duration for re-arming."""
        machine = StageMachine()
        assert machine.update_preferences(UserPreferences(work=600)) == 600
        machine.start()
        machine.on_expire()
        assert machine.update_preferences(UserPreferences(short_break=0)) == 300
        assert machine.stage == Stage.SHORT_BREAK

    def test_reset(self):
        """Reset discards the session."""
        machine = StageMachine()
        machine.start()
        machine.on_expire()
        machine.reset()
        assert machine.stage == Stage.NOT_STARTED
        assert machine.completed_work_count == 0

    def test_state_is_a_copy(self):
        """Mutating the returned state does not affect the machine."""
        machine = StageMachine()
        state = machine.state
        state.stage = Stage.LONG_BREAK
        assert machine.stage == Stage.NOT_STARTED


class TestCallback:
    """Test the transition callback."""

    def test_callback_called_on_state_changes(self):
        """Callback fires on start and each expiry."""
        seen = []
        machine = StageMachine(on_transition=seen.append)
        machine.start()
        machine.on_expire()

        assert [(t.previous, t.stage) for t in seen] == [
            (Stage.NOT_STARTED, Stage.WORK),
            (Stage.WORK, Stage.SHORT_BREAK),
        ]

    def test_callback_not_called_without_change(self):
        """Ignored expiries and repeated starts do not fire the callback."""
        seen = []
        machine = StageMachine(on_transition=seen.append)
        machine.on_expire()
        machine.start()
        machine.start()
        assert len(seen) == 1
