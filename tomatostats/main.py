"""TomatoStats command-line entry point.

Usage:
    python -m tomatostats.main --today              # today's work total
    python -m tomatostats.main --week [--offset -1] # this (or another) week
    python -m tomatostats.main --month              # this month's grid
    python -m tomatostats.main --year               # per-month totals
    python -m tomatostats.main --add 25m            # record a work interval
    python -m tomatostats.main --serve              # start the JSON API
"""

import argparse
import logging
import sys

from tomatostats.core.calendar_anchor import Granularity
from tomatostats.core.config import get_default_config_path, load_config
from tomatostats.core.errors import TomatoStatsError
from tomatostats.core.models import RecordKind
from tomatostats.manager import StatsManager
from tomatostats.reporting.formatter import TextFormatter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="tomatostats",
        description="TomatoStats: pomodoro work statistics",
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--today", action="store_true", help="Print today's work total")
    group.add_argument("--week", action="store_true", help="Print a week summary")
    group.add_argument("--month", action="store_true", help="Print a month summary")
    group.add_argument("--year", action="store_true", help="Print a year summary")
    group.add_argument(
        "--add",
        metavar="DURATION",
        help="Record a completed interval, e.g. '25m' or '1h 5m'",
    )
    group.add_argument("--serve", action="store_true", help="Run the JSON API")
    parser.add_argument(
        "--offset",
        type=int,
        default=0,
        help="Buckets relative to the current one (e.g. -1 for last week)",
    )
    parser.add_argument(
        "--kind",
        choices=[k.value for k in RecordKind],
        default=RecordKind.WORK.value,
        help="Kind of interval for --add",
    )
    parser.add_argument("--config", help="Path to config.json")
    return parser


def _print_today(manager: StatsManager) -> None:
    print(TextFormatter.format_today(manager.get_today_stats()), end="")


def _print_bucket(manager: StatsManager, granularity: Granularity, offset: int) -> None:
    nav = manager.navigator
    start = nav.offset(granularity, nav.current_start(granularity), offset)
    if granularity is Granularity.WEEK:
        print(TextFormatter.format_week(manager.get_week_stats(start)), end="")
    elif granularity is Granularity.MONTH:
        print(TextFormatter.format_month(manager.get_month_stats(start)), end="")
    else:
        print(TextFormatter.format_year(manager.get_year_stats(start)), end="")


def _add_record(manager: StatsManager, duration_text: str, kind: str) -> None:
    seconds = TextFormatter.parse_duration(duration_text)
    record = manager.add_record(seconds, kind)
    print(f"Recorded {TextFormatter.format_duration(record.duration)} "
          f"{record.kind.value} ({record.period.value})")
    if manager.store.last_persist_error is not None:
        print(f"Warning: not saved: {manager.store.last_persist_error}", file=sys.stderr)


def main(args: list[str] | None = None) -> int:
    """Entry point for TomatoStats.

    When *args* is ``None`` the arguments are read from ``sys.argv``.
    Returns a process exit code.
    """
    parser = build_parser()
    parsed = parser.parse_args(args)

    config_path = parsed.config or str(get_default_config_path())
    config = load_config(config_path)

    logging.basicConfig(
        level=getattr(logging, str(config.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        manager = StatsManager.from_config(config)
    except TomatoStatsError as exc:
        logger.error("Invalid configuration in %s: %s", config_path, exc)
        return 2

    try:
        if parsed.add is not None:
            _add_record(manager, parsed.add, parsed.kind)
        elif parsed.week:
            _print_bucket(manager, Granularity.WEEK, parsed.offset)
        elif parsed.month:
            _print_bucket(manager, Granularity.MONTH, parsed.offset)
        elif parsed.year:
            _print_bucket(manager, Granularity.YEAR, parsed.offset)
        elif parsed.serve:
            # Import here so report commands don't pull in Flask
            from tomatostats.ui.web import serve

            web = config.get("web", {})
            serve(manager, host=web.get("host", "127.0.0.1"), port=web.get("port", 5556))
        else:
            _print_today(manager)
    except TomatoStatsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        manager.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
