"""Week, month and year statistics derived from the record log.

Every query takes one snapshot of the store and recomputes its totals
from scratch; nothing is cached and the store is never modified.  Only
``RecordKind.WORK`` records count toward any total.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from tomatostats.core.calendar_anchor import CalendarAnchor, Granularity
from tomatostats.core.errors import InvalidBucketError
from tomatostats.core.models import (
    MonthDayCell,
    MonthStats,
    Period,
    Record,
    RecordKind,
    TodayStats,
    WeekCell,
    WeekStats,
    YearStats,
)
from tomatostats.persistence.store import RecordStore
from tomatostats.reporting.formatter import TextFormatter

DAYS_PER_WEEK = 7
MONTH_GRID_CELLS = 42  # 6 rows x 7 days
MONTHS_PER_YEAR = 12


class StatsAggregator:
    """Builds summary grids for calendar buckets.

    Bucket starts must already be truncated (see ``DateNavigator``); an
    untruncated value raises :class:`InvalidBucketError` instead of being
    silently rounded.
    """

    def __init__(self, store: RecordStore, anchor: CalendarAnchor) -> None:
        self.store = store
        self.anchor = anchor

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_week_stats(self, week_start: datetime) -> WeekStats:
        """Return 21 cells: one per (period, day), period-major."""
        self._require_bucket_start(week_start, Granularity.WEEK)
        by_day = self._work_by_day(self.store.snapshot())

        cells: list[WeekCell] = []
        for period in Period:
            for offset in range(DAYS_PER_WEEK):
                day = self.anchor.add_days(week_start, offset)
                duration = sum(
                    r.duration
                    for r in by_day.get(self.anchor.local_date(day), ())
                    if r.period is period
                )
                cells.append(WeekCell(date=day, period=period, duration=duration))

        daily_totals = tuple(
            sum(cell.duration for cell in cells[offset::DAYS_PER_WEEK])
            for offset in range(DAYS_PER_WEEK)
        )
        return WeekStats(week_start=week_start, cells=tuple(cells), daily_totals=daily_totals)

    def get_month_stats(self, month_start: datetime) -> MonthStats:
        """Return a fixed 6x7 grid with padding cells around the month."""
        self._require_bucket_start(month_start, Granularity.MONTH)
        by_day = self._work_by_day(self.store.snapshot())

        valid_days = self.anchor.range_of_month(month_start)
        leading_empty = (
            self.anchor.weekday(month_start) - self.anchor.first_weekday + 7
        ) % 7

        cells: list[MonthDayCell] = []
        for index in range(MONTH_GRID_CELLS):
            day_offset = index - leading_empty
            day = self.anchor.add_days(month_start, day_offset)
            if day_offset < 0 or (day_offset + 1) not in valid_days:
                cells.append(MonthDayCell(date=day, duration=0, is_in_current_month=False))
                continue
            duration = _total(by_day.get(self.anchor.local_date(day), ()))
            cells.append(MonthDayCell(date=day, duration=duration, is_in_current_month=True))

        return MonthStats(
            month_start=month_start,
            cells=tuple(cells),
            leading_empty=leading_empty,
        )

    def get_year_stats(self, year_start: datetime) -> YearStats:
        """Return work seconds for each of the 12 months of the year."""
        self._require_bucket_start(year_start, Granularity.YEAR)
        work = [r for r in self.store.snapshot() if r.kind is RecordKind.WORK]

        totals: list[int] = []
        for month in range(MONTHS_PER_YEAR):
            month_start = self.anchor.add_months(year_start, month)
            totals.append(_total(
                r for r in work
                if self.anchor.is_same(r.timestamp, month_start, Granularity.MONTH)
            ))
        return YearStats(year_start=year_start, monthly_totals=tuple(totals))

    def get_today_stats(self, now: Optional[datetime] = None) -> TodayStats:
        """Return today's formatted work time and its label."""
        now = now if now is not None else self.anchor.now()
        seconds = self.day_total(now)
        return TodayStats(
            duration=TextFormatter.format_duration(seconds),
            label=TextFormatter.today_label(self.anchor.to_local(now)),
        )

    def day_total(self, moment: datetime) -> int:
        """Work seconds on the local calendar day containing *moment*."""
        return _total(
            r for r in self.store.snapshot()
            if r.kind is RecordKind.WORK
            and self.anchor.is_same(r.timestamp, moment, Granularity.DAY)
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_bucket_start(self, moment: datetime, granularity: Granularity) -> None:
        if not self.anchor.is_bucket_start(moment, granularity):
            raise InvalidBucketError(
                f"{moment.isoformat()} is not the start of a {granularity.value}"
            )

    def _work_by_day(self, records: Iterable[Record]) -> dict[date, list[Record]]:
        """Index work records by local calendar day."""
        by_day: dict[date, list[Record]] = defaultdict(list)
        for record in records:
            if record.kind is RecordKind.WORK:
                by_day[self.anchor.local_date(record.timestamp)].append(record)
        return by_day


def _total(records: Iterable[Record]) -> int:
    return sum(r.duration for r in records)
