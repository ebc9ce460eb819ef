"""Textual-based UI hosting the Pomodoro cycle."""

import logging
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.screen import ModalScreen
from textual.timer import Timer
from textual.widgets import Button, Footer, Input, Label, ProgressBar, Static

from .countdown import Countdown, TimerState
from .durations import UserPreferences, resolve
from .scheduler import StageMachine
from .stages import Stage

logger = logging.getLogger(__name__)

LEAVE_PROMPT = "Are you sure you want to leave without logging your time?"

# Big digit representations (7 lines tall, 6 chars wide)
BIG_DIGITS = {
    "0": [" ████ ", "██  ██", "██  ██", "██  ██", "██  ██", "██  ██", " ████ "],
    "1": ["  ██  ", " ███  ", "  ██  ", "  ██  ", "  ██  ", "  ██  ", " ████ "],
    "2": [" ████ ", "██  ██", "    ██", "  ██  ", " ██   ", "██    ", "██████"],
    "3": [" ████ ", "██  ██", "    ██", "  ███ ", "    ██", "██  ██", " ████ "],
    "4": ["██  ██", "██  ██", "██  ██", "██████", "    ██", "    ██", "    ██"],
    "5": ["██████", "██    ", "██    ", "█████ ", "    ██", "██  ██", " ████ "],
    "6": [" ████ ", "██    ", "██    ", "█████ ", "██  ██", "██  ██", " ████ "],
    "7": ["██████", "    ██", "   ██ ", "  ██  ", "  ██  ", "  ██  ", "  ██  "],
    "8": [" ████ ", "██  ██", "██  ██", " ████ ", "██  ██", "██  ██", " ████ "],
    "9": [" ████ ", "██  ██", "██  ██", " █████", "    ██", "    ██", " ████ "],
    ":": ["      ", "  ██  ", "  ██  ", "      ", "  ██  ", "  ██  ", "      "],
}

CSS = """
#timer-container {
    align: center middle;
    height: auto;
}
#timer-container.work #stage-title { color: $error; }
#timer-container.short-break #stage-title { color: $success; }
#timer-container.long-break #stage-title { color: $accent; }
#settings-dialog, #confirm-dialog {
    width: 60;
    height: auto;
    border: thick $primary;
    padding: 1 2;
    background: $surface;
}
SettingsScreen, ConfirmScreen {
    align: center middle;
}
"""


def format_clock(seconds: int) -> str:
    """MM:SS for a number of seconds; minutes may exceed 59."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def render_big_time(seconds: int) -> str:
    """Render time as big ASCII digits."""
    time_str = format_clock(seconds)

    lines = []
    for line_num in range(7):
        line_parts = []
        for char in time_str:
            if char in BIG_DIGITS:
                line_parts.append(BIG_DIGITS[char][line_num])
            else:
                line_parts.append("      ")
        lines.append(" ".join(line_parts))

    return "\n".join(lines)


def timer_state(machine: StageMachine, countdown: Countdown) -> TimerState:
    if machine.stage == Stage.NOT_STARTED:
        return TimerState.NOT_STARTED
    elif countdown.is_running:
        return TimerState.RUNNING
    else:
        return TimerState.PAUSED


def parse_minutes(text: str) -> Optional[float]:
    """Minutes typed into the settings form; blank or junk means default."""
    try:
        return float(text)
    except ValueError:
        return None


class SettingsScreen(ModalScreen[Optional[UserPreferences]]):
    """Time settings (in minutes). Dismisses with new preferences or None."""

    def __init__(self, work: float = 25, short_break: float = 5, long_break: float = 15) -> None:
        super().__init__()
        self._initial = (work, short_break, long_break)

    def compose(self) -> ComposeResult:
        work, short_break, long_break = self._initial
        with Vertical(id="settings-dialog"):
            yield Label("Settings")
            yield Label("Time settings (in minutes)")
            with Horizontal():
                yield Input(str(work), placeholder="Work", type="number", id="work")
                yield Input(str(short_break), placeholder="Short Break", type="number", id="short-break")
                yield Input(str(long_break), placeholder="Long Break", type="number", id="long-break")
            with Horizontal():
                yield Button("Close", id="close")
                yield Button("Save", variant="primary", id="save")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "save":
            self.dismiss(None)
            return

        logger.info("Saving settings")
        self.dismiss(
            UserPreferences.from_minutes(
                work=parse_minutes(self.query_one("#work", Input).value),
                short_break=parse_minutes(self.query_one("#short-break", Input).value),
                long_break=parse_minutes(self.query_one("#long-break", Input).value),
            )
        )


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no prompt."""

    def __init__(self, message: str) -> None:
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal():
                yield Button("Stay", id="stay")
                yield Button("Leave", variant="error", id="leave")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "leave")


class BigTimer(Static):
    """Big ASCII timer display."""

    def __init__(self, countdown: Countdown, **kwargs) -> None:
        super().__init__(**kwargs)
        self.countdown = countdown

    def on_mount(self) -> None:
        self.update_display()

    def update_display(self) -> None:
        self.update(render_big_time(self.countdown.remaining_seconds))


class StageTitle(Static):
    """Stage title with completed work counter."""

    def __init__(self, machine: StageMachine, **kwargs) -> None:
        super().__init__(**kwargs)
        self.machine = machine

    def on_mount(self) -> None:
        self.update_display()

    def update_display(self) -> None:
        self.update(f"─── {self.machine.title}  #Poms: {self.machine.completed_work_count} ───")


class StatusBadge(Static):
    """Status indicator badge."""

    def __init__(self, machine: StageMachine, countdown: Countdown, **kwargs) -> None:
        super().__init__(**kwargs)
        self.machine = machine
        self.countdown = countdown

    def on_mount(self) -> None:
        self.update_display()

    def update_display(self) -> None:
        state = timer_state(self.machine, self.countdown)
        self.remove_class("running", "paused", "not-started")
        if state == TimerState.RUNNING:
            self.update("▶ RUNNING")
            self.add_class("running")
        elif state == TimerState.PAUSED:
            self.update("⏸ PAUSED")
            self.add_class("paused")
        else:
            self.update("■ NOT STARTED")
            self.add_class("not-started")


class PomoCycleApp(App):
    """Pomodoro cycle application."""

    CSS = CSS

    BINDINGS = [
        Binding("space", "toggle", "Start/Pause"),
        Binding("r", "restart", "Restart"),
        Binding("s", "settings", "Settings"),
        Binding("q", "request_quit", "Quit"),
    ]

    def __init__(self, machine: StageMachine) -> None:
        super().__init__()
        self.machine = machine
        self.countdown = Countdown()
        self._tick_timer: Timer | None = None

    def compose(self) -> ComposeResult:
        with Container(id="main"):
            with Vertical(id="timer-container"):
                yield StageTitle(self.machine, id="stage-title")
                yield BigTimer(self.countdown, id="big-timer")
                yield StatusBadge(self.machine, self.countdown, id="status-badge")
                yield ProgressBar(id="progress", show_eta=False, show_percentage=False)
        yield Footer()

    def on_mount(self) -> None:
        self._arm(self.machine.seconds)
        self._tick_timer = self.set_interval(1.0, self._tick)

    def _leave(self) -> None:
        """Stop ticking and exit."""
        if self._tick_timer is not None:
            self._tick_timer.stop()
            self._tick_timer = None
        self.exit()

    def _arm(self, seconds) -> None:
        """Re-arm the countdown after a stage or preference change."""
        self.countdown.arm(seconds, autostart=self.machine.is_active)
        self._refresh_display()

    def _tick(self) -> None:
        """Called every second."""
        if self.countdown.tick():
            self._arm(self.machine.on_expire().seconds)
        else:
            self._refresh_display()

    def _refresh_display(self) -> None:
        """Update all display elements."""
        self.query_one("#big-timer", BigTimer).update_display()
        self.query_one("#stage-title", StageTitle).update_display()
        self.query_one("#status-badge", StatusBadge).update_display()
        self._update_progress()
        self._update_stage_class()

    def _update_progress(self) -> None:
        progress_bar = self.query_one("#progress", ProgressBar)
        progress_bar.update(total=100, progress=self.countdown.progress * 100)

    def _update_stage_class(self) -> None:
        """Update CSS class based on current stage."""
        container = self.query_one("#timer-container")
        container.remove_class("work", "short-break", "long-break")

        if self.machine.stage == Stage.SHORT_BREAK:
            container.add_class("short-break")
        elif self.machine.stage == Stage.LONG_BREAK:
            container.add_class("long-break")
        else:
            container.add_class("work")

    def action_toggle(self) -> None:
        """Start the session, or pause/resume the running interval."""
        if not self.machine.is_active:
            self._arm(self.machine.start().seconds)
            return
        self.countdown.toggle()
        self._refresh_display()

    def action_restart(self) -> None:
        """Restart the current interval at full length."""
        self.countdown.restart()
        self._refresh_display()

    def action_settings(self) -> None:
        """Open settings; only available before the session starts."""
        if self.machine.is_active:
            self.notify("Settings can be changed before starting", severity="warning")
            return

        prefs = self.machine.preferences
        self.push_screen(
            SettingsScreen(
                work=_minutes(resolve(Stage.WORK, prefs)),
                short_break=_minutes(resolve(Stage.SHORT_BREAK, prefs)),
                long_break=_minutes(resolve(Stage.LONG_BREAK, prefs)),
            ),
            self._apply_settings,
        )

    def _apply_settings(self, prefs: Optional[UserPreferences]) -> None:
        if prefs is None:
            return
        self._arm(self.machine.update_preferences(prefs))

    def action_request_quit(self) -> None:
        """Quit, asking first if a session is under way."""
        if not self.machine.is_active:
            self._leave()
            return

        def leave(confirmed: bool | None) -> None:
            if confirmed:
                self._leave()

        self.push_screen(ConfirmScreen(LEAVE_PROMPT), leave)


def _minutes(seconds) -> float:
    """Seconds as a tidy minute value for the settings form."""
    mins = seconds / 60
    return int(mins) if float(mins).is_integer() else round(mins, 2)


def run_ui(machine: StageMachine) -> None:
    """Run the Pomodoro UI.

    Args:
        machine: The stage machine driving the session.
    """
    app = PomoCycleApp(machine)
    app.run()
