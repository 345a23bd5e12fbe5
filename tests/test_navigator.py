"""Unit tests for DateNavigator."""

import calendar
from datetime import datetime

import pytest

from tomatostats.core.calendar_anchor import CalendarAnchor, Granularity
from tomatostats.reporting.navigator import DateNavigator

NOW = datetime(2025, 1, 15, 14, 30)  # Wednesday


@pytest.fixture
def nav() -> DateNavigator:
    return DateNavigator(CalendarAnchor(), clock=lambda: NOW)


class TestCurrentBuckets:
    def test_current_starts(self, nav):
        assert nav.current_week_start() == datetime(2025, 1, 13)
        assert nav.current_month_start() == datetime(2025, 1, 1)
        assert nav.current_year_start() == datetime(2025, 1, 1)

    def test_current_week_start_sunday_anchor(self):
        nav = DateNavigator(CalendarAnchor(first_weekday=calendar.SUNDAY), clock=lambda: NOW)
        assert nav.current_week_start() == datetime(2025, 1, 12)

    def test_current_start_dispatch(self, nav):
        assert nav.current_start(Granularity.WEEK) == nav.current_week_start()
        assert nav.current_start(Granularity.DAY) == datetime(2025, 1, 15)

    def test_default_clock_is_anchor_now(self):
        nav = DateNavigator(CalendarAnchor())
        before = datetime.now()
        assert before <= nav.now() <= datetime.now()


class TestOffsets:
    def test_offset_week(self, nav):
        assert nav.offset_week(datetime(2025, 1, 13), -2) == datetime(2024, 12, 30)

    def test_offset_month_does_not_overflow(self, nav):
        assert nav.offset_month(datetime(2025, 1, 1), 1) == datetime(2025, 2, 1)
        assert nav.offset_month(datetime(2025, 1, 31), 1) == datetime(2025, 2, 28)

    def test_offset_year(self, nav):
        assert nav.offset_year(datetime(2025, 1, 1), -3) == datetime(2022, 1, 1)

    @pytest.mark.parametrize("delta", [1, 5, 52, 53, 120])
    def test_symmetry(self, nav, delta):
        week = datetime(2024, 12, 30)
        month = datetime(2024, 2, 1)
        year = datetime(2024, 1, 1)
        assert nav.offset_week(nav.offset_week(week, delta), -delta) == week
        assert nav.offset_month(nav.offset_month(month, delta), -delta) == month
        assert nav.offset_year(nav.offset_year(year, delta), -delta) == year
        assert nav.offset_week(nav.offset_week(week, -delta), delta) == week

    def test_offset_dispatch(self, nav):
        start = datetime(2025, 1, 1)
        assert nav.offset(Granularity.MONTH, start, 2) == datetime(2025, 3, 1)
        assert nav.offset(Granularity.DAY, start, 2) == datetime(2025, 1, 3)


class TestIsCurrent:
    def test_is_current_week(self, nav):
        assert nav.is_current_week(datetime(2025, 1, 13))
        assert not nav.is_current_week(datetime(2025, 1, 6))
        assert not nav.is_current_week(datetime(2025, 1, 20))

    def test_is_current_month_and_year(self, nav):
        assert nav.is_current_month(datetime(2025, 1, 1))
        assert not nav.is_current_month(datetime(2024, 1, 1))
        assert nav.is_current_year(datetime(2025, 1, 1))
        assert not nav.is_current_year(datetime(2024, 1, 1))

    def test_can_go_forward(self, nav):
        assert not nav.can_go_forward(Granularity.WEEK, datetime(2025, 1, 13))
        assert nav.can_go_forward(Granularity.WEEK, datetime(2025, 1, 6))
        assert nav.can_go_forward(Granularity.MONTH, datetime(2024, 12, 1))


class TestTodayIndex:
    def test_week(self, nav):
        assert nav.today_index_in_week(datetime(2025, 1, 13)) == 2
        assert nav.today_index_in_week(datetime(2025, 1, 6)) is None

    def test_month(self, nav):
        assert nav.today_index_in_month(datetime(2025, 1, 1)) == 14
        assert nav.today_index_in_month(datetime(2025, 2, 1)) is None
