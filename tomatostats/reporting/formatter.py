"""Text formatter for TomatoStats summaries.

Renders WeekStats, MonthStats and YearStats as aligned plain-text
reports, and provides duration format/parse utilities.
"""

import re
from datetime import datetime

from tomatostats.core.errors import InvalidInputError
from tomatostats.core.models import MonthStats, Period, TodayStats, WeekStats, YearStats


class TextFormatter:
    """Formats summary data as human-readable plain text."""

    # Pattern for parsing duration strings like "2h 15m", "2h", "15m", "0m"
    _DURATION_RE = re.compile(
        r"^\s*(?:(\d+)h)?\s*(?:(\d+)m)?\s*$"
    )

    @staticmethod
    def format_duration(seconds: int) -> str:
        """Format seconds as 'Xh Ym', 'Xh' or 'Ym' (e.g. '2h 15m', '1h', '25m').

        Truncates to whole minutes. Raises InvalidInputError for negative values.
        """
        if seconds < 0:
            raise InvalidInputError(f"Duration must be non-negative, got {seconds}")
        total_minutes = int(seconds) // 60
        if total_minutes < 60:
            return f"{total_minutes}m"
        hours, minutes = divmod(total_minutes, 60)
        if minutes == 0:
            return f"{hours}h"
        return f"{hours}h {minutes}m"

    @staticmethod
    def parse_duration(text: str) -> int:
        """Parse 'Xh Ym', 'Xh', or 'Ym' back to seconds.

        Raises InvalidInputError if the text doesn't match the expected format.
        """
        match = TextFormatter._DURATION_RE.match(text)
        if not match or (match.group(1) is None and match.group(2) is None):
            raise InvalidInputError(f"Invalid duration format: {text!r}")

        hours = int(match.group(1)) if match.group(1) else 0
        minutes = int(match.group(2)) if match.group(2) else 0
        return (hours * 60 + minutes) * 60

    # ------------------------------------------------------------------
    # Titles and labels
    # ------------------------------------------------------------------

    @staticmethod
    def _month_day(moment: datetime) -> str:
        return f"{moment.strftime('%b')} {moment.day}"

    @staticmethod
    def week_range(stats: WeekStats) -> str:
        """e.g. 'Jan 6 - Jan 12'."""
        return f"{TextFormatter._month_day(stats.week_start)} - {TextFormatter._month_day(stats.week_end)}"

    @staticmethod
    def month_title(stats: MonthStats) -> str:
        """e.g. 'January 2025'."""
        return stats.month_start.strftime("%B %Y")

    @staticmethod
    def year_title(stats: YearStats) -> str:
        return str(stats.year_start.year)

    @staticmethod
    def today_label(now: datetime) -> str:
        return f"{TextFormatter._month_day(now)} · Today's total"

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    @staticmethod
    def format_today(stats: TodayStats) -> str:
        return f"{stats.label}: {stats.duration}\n"

    @staticmethod
    def format_week(stats: WeekStats) -> str:
        """Render a week as a period x day table.

        Returns lines like:
          Week: Jan 6 - Jan 12

                       Mon    Tue  ...
          Morning      25m      -  ...
          ...
          Total: 1h 15m
        """
        days = stats.cells[:7]
        headers = [cell.date.strftime("%a") for cell in days]
        rows: list[tuple[str, list[str]]] = []
        for row_index, period in enumerate(Period):
            row_cells = stats.cells[row_index * 7:(row_index + 1) * 7]
            rows.append((period.value, [_cell_text(c.duration) for c in row_cells]))
        rows.append(("Day total", [_cell_text(d) for d in stats.daily_totals]))

        label_width = max(len(label) for label, _ in rows)
        col_width = max(
            [len(h) for h in headers] + [len(v) for _, values in rows for v in values]
        )

        lines = [f"Week: {TextFormatter.week_range(stats)}", ""]
        lines.append(
            "  " + " " * label_width + "".join(f"  {h:>{col_width}}" for h in headers)
        )
        separator = "  " + "─" * (len(lines[-1]) - 2)
        lines.append(separator)
        for label, values in rows:
            if label == "Day total":
                lines.append(separator)
            lines.append(
                f"  {label:<{label_width}}" + "".join(f"  {v:>{col_width}}" for v in values)
            )
        lines.append("")
        lines.append(f"Total: {TextFormatter.format_duration(stats.total_duration)}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def format_month(stats: MonthStats) -> str:
        """Render the 6x7 month grid; padding cells are left blank."""
        headers = [cell.date.strftime("%a") for cell in stats.cells[:7]]
        entries = []
        for cell in stats.cells:
            if not cell.is_in_current_month:
                entries.append("")
            elif cell.is_empty:
                entries.append(f"{cell.day_number}")
            else:
                entries.append(f"{cell.day_number}:{TextFormatter.format_duration(cell.duration)}")
        col_width = max([len(h) for h in headers] + [len(e) for e in entries])

        lines = [f"Month: {TextFormatter.month_title(stats)}", ""]
        lines.append("  " + "  ".join(f"{h:>{col_width}}" for h in headers))
        for row in range(6):
            week = entries[row * 7:(row + 1) * 7]
            if not any(week):
                continue
            lines.append("  " + "  ".join(f"{e:>{col_width}}" for e in week))
        lines.append("")
        lines.append(f"Total: {TextFormatter.format_duration(stats.total_duration)}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def format_year(stats: YearStats) -> str:
        """Render one line per month with its work total."""
        lines = [f"Year: {TextFormatter.year_title(stats)}", ""]
        for index, seconds in enumerate(stats.monthly_totals):
            month_name = stats.year_start.replace(month=index + 1).strftime("%B")
            lines.append(f"  {month_name:<9}  {_cell_text(seconds):>8}")
        lines.append("")
        lines.append(f"Total: {TextFormatter.format_duration(stats.total_duration)}")
        return "\n".join(lines) + "\n"


def _cell_text(seconds: int) -> str:
    return TextFormatter.format_duration(seconds) if seconds else "-"
