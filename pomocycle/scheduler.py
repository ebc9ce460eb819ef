"""Pure logic for the Pomodoro stage state machine."""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from .durations import DurationResolver, Seconds, UserPreferences
from .stages import Stage, stage_title

logger = logging.getLogger(__name__)

DEFAULT_LONG_BREAK_THRESHOLD = 2


@dataclass
class SessionState:
    """Mutable state of one Pomodoro session."""
    stage: Stage = Stage.NOT_STARTED
    completed_work_count: int = 0  # Work intervals since the last long break


@dataclass(frozen=True)
class Transition:
    """Result of a start or expiry: what the host should arm next."""
    previous: Stage
    stage: Stage
    seconds: Seconds
    title: str
    completed_work_count: int


class StageMachine:
    """Pomodoro stage state machine.

    Owns the session state and decides, on each expiry, the next stage and
    how many work intervals have been completed. Timer mechanics belong to
    the host.
    """

    def __init__(
        self,
        prefs: Optional[UserPreferences] = None,
        long_break_threshold: int = DEFAULT_LONG_BREAK_THRESHOLD,
        on_transition: Optional[Callable[[Transition], None]] = None,
    ):
        """Initialize the machine.

        Args:
            prefs: User duration overrides.
            long_break_threshold: Completed work intervals before a long break.
            on_transition: Callback(transition) after every state change.
        """
        if long_break_threshold < 1:
            raise ValueError(
                f"long_break_threshold must be at least 1, got {long_break_threshold}"
            )
        self.long_break_threshold = long_break_threshold
        self.on_transition = on_transition
        self._resolver = DurationResolver(prefs)
        self._state = SessionState()

        self._expiry_rules: Dict[Stage, Callable[[], Tuple[Stage, int]]] = {
            Stage.NOT_STARTED: self._expire_not_started,
            Stage.WORK: self._expire_work,
            Stage.SHORT_BREAK: self._expire_short_break,
            Stage.LONG_BREAK: self._expire_long_break,
        }

    @property
    def stage(self) -> Stage:
        """Current stage."""
        return self._state.stage

    @property
    def completed_work_count(self) -> int:
        """Work intervals completed since the last long break."""
        return self._state.completed_work_count

    @property
    def state(self) -> SessionState:
        """Snapshot of the session state."""
        return replace(self._state)

    @property
    def preferences(self) -> UserPreferences:
        return self._resolver.prefs

    @property
    def seconds(self) -> Seconds:
        """Resolved duration of the current stage."""
        return self._resolver.resolve(self.stage)

    @property
    def title(self) -> str:
        return stage_title(self.stage)

    @property
    def is_active(self) -> bool:
        """True once the session has left NOT_STARTED."""
        return self.stage != Stage.NOT_STARTED

    def start(self) -> Transition:
        """Move off NOT_STARTED into the first work interval.

        On an already active session the state is left alone and the
        current stage is returned so the host can resume.
        """
        previous = self.stage
        if previous != Stage.NOT_STARTED:
            return self._transition(previous, notify=False)

        logger.info("Starting timer")
        self._state.stage = Stage.WORK
        return self._transition(previous)

    def on_expire(self) -> Transition:
        """Advance the session after the current interval's timer expired."""
        previous = self.stage
        stage, count = self._expiry_rules[previous]()
        if previous == Stage.NOT_STARTED:
            return self._transition(previous, notify=False)

        self._state.stage = stage
        self._state.completed_work_count = count
        return self._transition(previous)

    def update_preferences(self, prefs: UserPreferences) -> Seconds:
        """Replace user preferences.

        Returns:
            Resolved duration of the current stage, for re-arming.
        """
        self._resolver = DurationResolver(prefs)
        return self.seconds

    def reset(self) -> None:
        """Discard the session and return to the initial state."""
        self._state = SessionState()

    def _expire_not_started(self) -> Tuple[Stage, int]:
        logger.debug("Ignoring expiry while not started")
        return Stage.NOT_STARTED, self.completed_work_count

    def _expire_work(self) -> Tuple[Stage, int]:
        logger.info("Finished work session")
        completed = self.completed_work_count + 1
        if completed >= self.long_break_threshold:
            return Stage.LONG_BREAK, 0
        return Stage.SHORT_BREAK, completed

    def _expire_short_break(self) -> Tuple[Stage, int]:
        logger.info("Short break done")
        return Stage.WORK, self.completed_work_count

    def _expire_long_break(self) -> Tuple[Stage, int]:
        logger.info("Long break done")
        return Stage.NOT_STARTED, self.completed_work_count

    def _transition(self, previous: Stage, notify: bool = True) -> Transition:
        transition = Transition(
            previous=previous,
            stage=self.stage,
            seconds=self.seconds,
            title=self.title,
            completed_work_count=self.completed_work_count,
        )
        if notify and self.on_transition:
            self.on_transition(transition)
        return transition
