"""Resolve interval lengths from user preferences and stage defaults."""

import logging
import math
from dataclasses import dataclass, replace
from numbers import Real
from typing import Optional, Union

from .stages import Stage

logger = logging.getLogger(__name__)

Seconds = Union[int, float]

DEFAULT_WORK = 25 * 60
DEFAULT_SHORT_BREAK = 5 * 60
DEFAULT_LONG_BREAK = 15 * 60

# Upper bound (exclusive) for any stored duration: one day.
MAX_DURATION = 86400

DEFAULT_DURATIONS = {
    Stage.WORK: DEFAULT_WORK,
    Stage.SHORT_BREAK: DEFAULT_SHORT_BREAK,
    Stage.LONG_BREAK: DEFAULT_LONG_BREAK,
}


@dataclass(frozen=True)
class UserPreferences:
    """User's last configured duration for each stage, in seconds.

    ``None`` means "use the system default".
    """
    work: Optional[Seconds] = None
    short_break: Optional[Seconds] = None
    long_break: Optional[Seconds] = None

    @classmethod
    def from_minutes(
        cls,
        work: Optional[Seconds] = None,
        short_break: Optional[Seconds] = None,
        long_break: Optional[Seconds] = None,
    ) -> "UserPreferences":
        """Build preferences from minute values (settings form, CLI)."""

        def to_secs(mins: Optional[Seconds]) -> Optional[Seconds]:
            return None if mins is None else mins * 60

        return cls(
            work=to_secs(work),
            short_break=to_secs(short_break),
            long_break=to_secs(long_break),
        )

    def with_overrides(self, **changes: Optional[Seconds]) -> "UserPreferences":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def for_stage(self, stage: Stage) -> Optional[Seconds]:
        """Stored value for a stage. NOT_STARTED shares the work setting."""
        if stage in (Stage.NOT_STARTED, Stage.WORK):
            return self.work
        elif stage == Stage.SHORT_BREAK:
            return self.short_break
        else:
            return self.long_break


def is_valid_duration(value) -> bool:
    """True for a finite real number in the open range (0, MAX_DURATION)."""
    if value is None or isinstance(value, bool) or not isinstance(value, Real):
        return False
    return math.isfinite(value) and 0 < value < MAX_DURATION


def verify_duration(value, default: Seconds) -> Seconds:
    """Return ``value`` if it is a usable duration, else ``default``."""
    return value if is_valid_duration(value) else default


def resolve(stage: Stage, prefs: Optional[UserPreferences] = None) -> Seconds:
    """Authoritative interval length in seconds for ``stage``.

    Args:
        stage: Stage to resolve. NOT_STARTED resolves as WORK.
        prefs: User overrides; ``None`` means all defaults.

    Returns:
        The override when valid, otherwise the stage default.
    """
    key = Stage.WORK if stage == Stage.NOT_STARTED else stage
    default = DEFAULT_DURATIONS[key]
    if prefs is None:
        return default

    candidate = prefs.for_stage(key)
    if candidate is None:
        return default
    if not is_valid_duration(candidate):
        logger.debug(
            "Ignoring %s override %r, using default %s", key.name, candidate, default
        )
        return default
    return candidate


class DurationResolver:
    """Resolver bound to one set of preferences."""

    def __init__(self, prefs: Optional[UserPreferences] = None):
        self.prefs = prefs if prefs is not None else UserPreferences()

    def resolve(self, stage: Stage) -> Seconds:
        return resolve(stage, self.prefs)
