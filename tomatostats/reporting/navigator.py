"""Bucket navigation for the statistics views.

Computes the current week/month/year start and steps between buckets.
The clock is injectable so that "now" can be pinned in tests.
"""

from datetime import datetime
from typing import Callable, Optional

from tomatostats.core.calendar_anchor import CalendarAnchor, Granularity


class DateNavigator:
    """Moves between calendar buckets under one CalendarAnchor."""

    def __init__(
        self,
        anchor: CalendarAnchor,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.anchor = anchor
        self._clock = clock or anchor.now

    def now(self) -> datetime:
        return self._clock()

    # ------------------------------------------------------------------
    # Current bucket
    # ------------------------------------------------------------------

    def current_week_start(self) -> datetime:
        return self.anchor.start_of_week(self.now())

    def current_month_start(self) -> datetime:
        return self.anchor.start_of_month(self.now())

    def current_year_start(self) -> datetime:
        return self.anchor.start_of_year(self.now())

    def current_start(self, granularity: Granularity) -> datetime:
        return self.anchor.truncate(self.now(), granularity)

    # ------------------------------------------------------------------
    # Offsets
    # ------------------------------------------------------------------

    def offset_week(self, week_start: datetime, weeks: int) -> datetime:
        return self.anchor.add_weeks(week_start, weeks)

    def offset_month(self, month_start: datetime, months: int) -> datetime:
        return self.anchor.add_months(month_start, months)

    def offset_year(self, year_start: datetime, years: int) -> datetime:
        return self.anchor.add_years(year_start, years)

    def offset(self, granularity: Granularity, start: datetime, delta: int) -> datetime:
        if granularity is Granularity.WEEK:
            return self.offset_week(start, delta)
        if granularity is Granularity.MONTH:
            return self.offset_month(start, delta)
        if granularity is Granularity.YEAR:
            return self.offset_year(start, delta)
        return self.anchor.add_days(start, delta)

    # ------------------------------------------------------------------
    # Current-bucket checks
    # ------------------------------------------------------------------

    def is_current_week(self, week_start: datetime) -> bool:
        return self.anchor.is_same(week_start, self.now(), Granularity.WEEK)

    def is_current_month(self, month_start: datetime) -> bool:
        return self.anchor.is_same(month_start, self.now(), Granularity.MONTH)

    def is_current_year(self, year_start: datetime) -> bool:
        return self.anchor.is_same(year_start, self.now(), Granularity.YEAR)

    def is_current(self, granularity: Granularity, start: datetime) -> bool:
        return self.anchor.is_same(start, self.now(), granularity)

    def can_go_forward(self, granularity: Granularity, start: datetime) -> bool:
        """Forward navigation stops at the bucket containing today."""
        return not self.is_current(granularity, start)

    # ------------------------------------------------------------------
    # Today inside a bucket
    # ------------------------------------------------------------------

    def today_index_in_week(self, week_start: datetime) -> Optional[int]:
        """Day offset of today within the week, or None if not this week."""
        if not self.is_current_week(week_start):
            return None
        today = self.anchor.local_date(self.now())
        return (today - self.anchor.local_date(week_start)).days

    def today_index_in_month(self, month_start: datetime) -> Optional[int]:
        """Zero-based day of month for today, or None if not this month."""
        if not self.is_current_month(month_start):
            return None
        return self.anchor.local_date(self.now()).day - 1
