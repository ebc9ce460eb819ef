"""Countdown mechanics for the timer host."""

from enum import Enum, auto

from .durations import Seconds


class TimerState(Enum):
    """Display state of the host timer."""
    NOT_STARTED = auto()
    RUNNING = auto()
    PAUSED = auto()


class Countdown:
    """One armed interval at a time, ticked once per second by the host.

    Fires an expiry exactly once per armed interval; arming again replaces
    whatever was pending.
    """

    def __init__(self) -> None:
        self._total = 0
        self._remaining = 0
        self._running = False
        self._armed = False

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def total_seconds(self) -> int:
        return self._total

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_armed(self) -> bool:
        """True until the armed interval has expired."""
        return self._armed

    @property
    def progress(self) -> float:
        """Progress through the armed interval (0.0 to 1.0)."""
        if self._total == 0:
            return 1.0
        return 1.0 - (self._remaining / self._total)

    def arm(self, seconds: Seconds, autostart: bool = True) -> None:
        """Arm a new interval, cancelling any pending one.

        The host ticks once a second, so ``seconds`` is rounded to whole
        seconds; any positive duration runs for at least one.
        """
        self._total = max(1, int(round(seconds))) if seconds > 0 else 0
        self._remaining = self._total
        self._armed = True
        self._running = autostart

    def start(self) -> None:
        if self._armed:
            self._running = True

    def pause(self) -> None:
        self._running = False

    def toggle(self) -> None:
        """Toggle between running and paused."""
        if self._running:
            self.pause()
        else:
            self.start()

    def restart(self) -> None:
        """Re-arm the current interval at full length, keeping run state."""
        self.arm(self._total, autostart=self._running)

    def tick(self) -> bool:
        """Decrement by one second if running.

        Returns:
            True if the armed interval expired on this tick.
        """
        if not self._running or not self._armed:
            return False

        if self._remaining > 0:
            self._remaining -= 1

        if self._remaining == 0:
            self._armed = False
            self._running = False
            return True

        return False
