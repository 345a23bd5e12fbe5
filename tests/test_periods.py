"""Unit tests for the period classifier."""

from datetime import datetime, timedelta, timezone

import pytest

from tomatostats.core.calendar_anchor import CalendarAnchor
from tomatostats.core.errors import InvalidInputError
from tomatostats.core.models import Period
from tomatostats.core.periods import classify, period_for


class TestClassify:
    @pytest.mark.parametrize(
        "hour, expected",
        [
            (0, Period.MORNING),
            (11, Period.MORNING),
            (12, Period.AFTERNOON),
            (17, Period.AFTERNOON),
            (18, Period.EVENING),
            (23, Period.EVENING),
        ],
    )
    def test_boundaries(self, hour, expected):
        assert classify(hour) is expected

    def test_every_hour_maps_to_one_of_three(self):
        results = [classify(h) for h in range(24)]
        assert set(results) == set(Period)
        assert results.count(Period.MORNING) == 12
        assert results.count(Period.AFTERNOON) == 6
        assert results.count(Period.EVENING) == 6

    def test_monotonic_by_range(self):
        order = list(Period)
        indexes = [order.index(classify(h)) for h in range(24)]
        assert indexes == sorted(indexes)

    @pytest.mark.parametrize("hour", [-1, 24, 100])
    def test_out_of_range_raises(self, hour):
        with pytest.raises(InvalidInputError):
            classify(hour)


class TestPeriodFor:
    def test_naive_uses_wall_clock_hour(self):
        anchor = CalendarAnchor()
        assert period_for(datetime(2025, 3, 5, 9, 0), anchor) is Period.MORNING
        assert period_for(datetime(2025, 3, 5, 19, 30), anchor) is Period.EVENING

    def test_uses_local_hour_not_utc(self):
        """11:00 UTC is 19:00 at UTC+8, so it classifies as evening there."""
        moment = datetime(2025, 3, 5, 11, 0, tzinfo=timezone.utc)
        utc_anchor = CalendarAnchor(tz=timezone.utc)
        plus8 = CalendarAnchor(tz=timezone(timedelta(hours=8)))

        assert period_for(moment, utc_anchor) is Period.MORNING
        assert period_for(moment, plus8) is Period.EVENING
