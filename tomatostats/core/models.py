"""Core data models for TomatoStats.

Defines all dataclasses and enums used across the application:
- Log entries: Period, RecordKind, Record
- Week summary: WeekCell, WeekStats
- Month summary: MonthDayCell, MonthStats
- Year summary: YearStats
- Today: TodayStats
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple


# ---------------------------------------------------------------------------
# Log entries
# ---------------------------------------------------------------------------

class Period(Enum):
    """Part of the day a record was completed in. Values are persisted."""
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"


class RecordKind(Enum):
    """Kind of completed interval. Values are persisted."""
    WORK = "work"
    SHORT_BREAK = "shortBreak"
    LONG_BREAK = "longBreak"


@dataclass(frozen=True)
class Record:
    """One completed timed interval.

    ``period`` is derived from the timestamp when the record is created and
    stored alongside it; it is never recomputed on load.
    """
    id: str
    timestamp: datetime
    duration: int      # seconds
    kind: RecordKind
    period: Period

    @staticmethod
    def new_id() -> str:
        return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Shared helpers for cells
# ---------------------------------------------------------------------------

SECONDS_PER_FULL_INTENSITY = 3600


def _intensity(duration: int) -> float:
    if duration <= 0:
        return 0.0
    return min(duration / SECONDS_PER_FULL_INTENSITY, 1.0)


# ---------------------------------------------------------------------------
# Week summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class WeekCell:
    """Work time for one (day, period) slot of a week heatmap."""
    date: datetime
    period: Period
    duration: int

    @property
    def is_empty(self) -> bool:
        return self.duration == 0

    @property
    def intensity(self) -> float:
        """Colour intensity in [0, 1]; one hour or more saturates."""
        return _intensity(self.duration)


@dataclass(frozen=True)
class WeekStats:
    """21 cells ordered period-major, day-minor (3 rows of 7 days)."""
    week_start: datetime
    cells: tuple[WeekCell, ...]
    daily_totals: tuple[int, ...] = field(default=())  # 7 entries, day order

    @property
    def total_duration(self) -> int:
        return sum(cell.duration for cell in self.cells)

    @property
    def week_end(self) -> datetime:
        return self.cells[-1].date if self.cells else self.week_start


# ---------------------------------------------------------------------------
# Month summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MonthDayCell:
    """One slot of the 6x7 month grid.

    Padding cells (``is_in_current_month`` False) always carry 0 seconds.
    """
    date: datetime
    duration: int
    is_in_current_month: bool

    @property
    def is_empty(self) -> bool:
        return self.duration == 0

    @property
    def intensity(self) -> float:
        return _intensity(self.duration)

    @property
    def day_number(self) -> int:
        return self.date.day


@dataclass(frozen=True)
class MonthStats:
    """42 cells (6 rows of 7 days) padded around the month."""
    month_start: datetime
    cells: tuple[MonthDayCell, ...]
    leading_empty: int = 0

    @property
    def total_duration(self) -> int:
        return sum(cell.duration for cell in self.cells)

    @property
    def days_in_month(self) -> int:
        return sum(1 for cell in self.cells if cell.is_in_current_month)

    @property
    def daily_totals(self) -> tuple[int, ...]:
        """Per-day totals for the days of the month only, in day order."""
        return tuple(cell.duration for cell in self.cells if cell.is_in_current_month)


# ---------------------------------------------------------------------------
# Year summary
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class YearStats:
    """Work seconds per calendar month; index 0 is January."""
    year_start: datetime
    monthly_totals: tuple[int, ...]

    @property
    def total_duration(self) -> int:
        return sum(self.monthly_totals)


# ---------------------------------------------------------------------------
# Today
# ---------------------------------------------------------------------------

class TodayStats(NamedTuple):
    """Formatted work time for today plus its display label."""
    duration: str
    label: str
