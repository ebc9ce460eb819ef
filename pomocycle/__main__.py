"""Entry point for python -m pomocycle."""

import argparse
import logging
import sys
from typing import List, Optional

from .durations import UserPreferences, resolve
from .scheduler import DEFAULT_LONG_BREAK_THRESHOLD, StageMachine
from .stages import Stage
from .ui import run_ui

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pomocycle",
        description="Terminal Pomodoro cycle: work, short breaks, then a long break",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Space    Start/Pause (starts the session when not started)
  r        Restart current interval
  s        Settings (before the session starts)
  q        Quit (asks first while a session is under way)

Durations outside (0, 1440) minutes fall back to the defaults 25/5/15.

Examples:
  pomocycle                      # Defaults (25/5/15, long break after 2)
  pomocycle --work 50 --cycle 4  # 50-minute pomodoros, long break after 4
  pomocycle --log-file pomo.log --log-level INFO
""",
    )

    parser.add_argument(
        "--work",
        type=float,
        metavar="MINS",
        help="Work interval in minutes (default: 25)",
    )
    parser.add_argument(
        "--short",
        type=float,
        metavar="MINS",
        help="Short break in minutes (default: 5)",
    )
    parser.add_argument(
        "--long",
        type=float,
        metavar="MINS",
        help="Long break in minutes (default: 15)",
    )
    parser.add_argument(
        "--cycle",
        type=positive_int,
        default=DEFAULT_LONG_BREAK_THRESHOLD,
        metavar="N",
        help=f"Work intervals before a long break (default: {DEFAULT_LONG_BREAK_THRESHOLD})",
    )

    # Logging
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Write logs to PATH (the UI owns the terminal)",
    )

    return parser.parse_args(argv)


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """Configure logging for the application."""
    if log_file:
        logging.basicConfig(
            level=getattr(logging, level),
            format=LOG_FORMAT,
            datefmt="%Y-%m-%d %H:%M:%S",
            filename=log_file,
        )
    else:
        logging.getLogger().addHandler(logging.NullHandler())
    return logging.getLogger("pomocycle")


def build_machine(args: argparse.Namespace) -> StageMachine:
    """Stage machine configured from parsed arguments."""
    prefs = UserPreferences.from_minutes(
        work=args.work,
        short_break=args.short,
        long_break=args.long,
    )
    return StageMachine(prefs, long_break_threshold=args.cycle)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logger = setup_logging(args.log_level, args.log_file)

    machine = build_machine(args)
    logger.info(
        "Session configured: work=%ss short=%ss long=%ss cycle=%d",
        resolve(Stage.WORK, machine.preferences),
        resolve(Stage.SHORT_BREAK, machine.preferences),
        resolve(Stage.LONG_BREAK, machine.preferences),
        machine.long_break_threshold,
    )

    try:
        run_ui(machine)
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
