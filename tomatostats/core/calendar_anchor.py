"""Calendar arithmetic with a configurable first weekday.

All statistics are bucketed by local calendar days, so every date
truncation, component lookup and date addition goes through one
``CalendarAnchor`` value.  Weekdays use the :mod:`calendar` numbering
(Monday = 0 ... Sunday = 6).

Aware datetimes are converted into the anchor's zone (``tz=None`` means
the system local zone).  Naive datetimes are treated as local wall time.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Optional

from tomatostats.core.errors import InvalidInputError

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class Granularity(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class CalendarAnchor:
    """Calendar configuration shared by aggregators and the navigator."""
    first_weekday: int = calendar.MONDAY
    tz: Optional[tzinfo] = None

    def __post_init__(self) -> None:
        if (
            not isinstance(self.first_weekday, int)
            or isinstance(self.first_weekday, bool)
            or not 0 <= self.first_weekday <= 6
        ):
            raise InvalidInputError(
                f"first_weekday must be in 0..6, got {self.first_weekday!r}"
            )

    # ------------------------------------------------------------------
    # Local components
    # ------------------------------------------------------------------

    def now(self) -> datetime:
        """Return the current time in the anchor's zone."""
        if self.tz is None:
            return datetime.now()
        return datetime.now(self.tz)

    def to_local(self, moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(self.tz)

    def hour(self, moment: datetime) -> int:
        return self.to_local(moment).hour

    def weekday(self, moment: datetime) -> int:
        return self.to_local(moment).weekday()

    def local_date(self, moment: datetime) -> date:
        return self.to_local(moment).date()

    # ------------------------------------------------------------------
    # Truncation
    # ------------------------------------------------------------------

    def start_of_day(self, moment: datetime) -> datetime:
        return self.to_local(moment).replace(hour=0, minute=0, second=0, microsecond=0)

    def start_of_week(self, moment: datetime) -> datetime:
        day = self.start_of_day(moment)
        back = (day.weekday() - self.first_weekday) % 7
        return self.add_days(day, -back)

    def start_of_month(self, moment: datetime) -> datetime:
        return self.start_of_day(moment).replace(day=1)

    def start_of_year(self, moment: datetime) -> datetime:
        return self.start_of_day(moment).replace(month=1, day=1)

    def truncate(self, moment: datetime, granularity: Granularity) -> datetime:
        if granularity is Granularity.DAY:
            return self.start_of_day(moment)
        if granularity is Granularity.WEEK:
            return self.start_of_week(moment)
        if granularity is Granularity.MONTH:
            return self.start_of_month(moment)
        return self.start_of_year(moment)

    def is_bucket_start(self, moment: datetime, granularity: Granularity) -> bool:
        """True if *moment* is already truncated to *granularity*."""
        local = self.to_local(moment)
        return local == self.truncate(local, granularity)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def add_days(self, moment: datetime, days: int) -> datetime:
        # Aware arithmetic keeps the wall clock, so midnight stays midnight
        # across DST transitions.
        try:
            return moment + timedelta(days=days)
        except OverflowError as exc:
            raise InvalidInputError(f"Date out of range: {moment!r} + {days} days") from exc

    def add_weeks(self, moment: datetime, weeks: int) -> datetime:
        return self.add_days(moment, 7 * weeks)

    def add_months(self, moment: datetime, months: int) -> datetime:
        """Add *months*, clamping the day to the target month's length."""
        index = moment.year * 12 + (moment.month - 1) + months
        year, month_index = divmod(index, 12)
        month = month_index + 1
        if not 1 <= year <= 9999:
            raise InvalidInputError(f"Date out of range: {moment!r} + {months} months")
        day = min(moment.day, calendar.monthrange(year, month)[1])
        return moment.replace(year=year, month=month, day=day)

    def add_years(self, moment: datetime, years: int) -> datetime:
        return self.add_months(moment, 12 * years)

    def days_in_month(self, moment: datetime) -> int:
        local = self.to_local(moment)
        return calendar.monthrange(local.year, local.month)[1]

    def range_of_month(self, moment: datetime) -> range:
        """Valid day-of-month numbers for the month containing *moment*."""
        return range(1, self.days_in_month(moment) + 1)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def is_same(self, a: datetime, b: datetime, granularity: Granularity) -> bool:
        """Return True if *a* and *b* fall in the same local bucket."""
        la, lb = self.to_local(a), self.to_local(b)
        if granularity is Granularity.DAY:
            return la.date() == lb.date()
        if granularity is Granularity.WEEK:
            return self.start_of_week(la).date() == self.start_of_week(lb).date()
        if granularity is Granularity.MONTH:
            return (la.year, la.month) == (lb.year, lb.month)
        return la.year == lb.year

    # ------------------------------------------------------------------
    # Weekday ordering
    # ------------------------------------------------------------------

    def weekday_order(self) -> tuple[int, ...]:
        """The seven weekday numbers, starting at ``first_weekday``."""
        return tuple((self.first_weekday + i) % 7 for i in range(7))

    def weekday_labels(self) -> tuple[str, ...]:
        return tuple(WEEKDAY_LABELS[d] for d in self.weekday_order())
