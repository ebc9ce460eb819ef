"""Stages of a Pomodoro cycle."""

from enum import Enum, auto


class Stage(Enum):
    """Cycle stage types."""
    NOT_STARTED = auto()
    WORK = auto()
    SHORT_BREAK = auto()
    LONG_BREAK = auto()


STAGE_TITLES = {
    Stage.NOT_STARTED: "Time to grind",
    Stage.WORK: "Time to grind",
    Stage.SHORT_BREAK: "Nice! Time for a short break",
    Stage.LONG_BREAK: "Good job! Time for a long break",
}


def stage_title(stage: Stage) -> str:
    """Human-readable title shown while a stage is current."""
    return STAGE_TITLES[stage]
