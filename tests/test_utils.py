from datetime import date, datetime
from decimal import Decimal

import pytest

from timesheets.fastapi.core.utils import (
    added_hours,
    day_index,
    elapsed_minutes,
    minutes_to_hours,
    normalize_username,
    sum_hours,
    to_hours,
    week_start_for,
    weekday_name,
)


class TestWeekBucketing:
    def test_sunday_is_its_own_week_start(self):
        assert week_start_for(date(2024, 1, 7)) == date(2024, 1, 7)

    def test_wednesday_maps_to_sunday_three_days_before(self):
        assert week_start_for(date(2024, 1, 10)) == date(2024, 1, 7)

    def test_saturday_stays_in_the_same_week(self):
        assert week_start_for(date(2024, 1, 13)) == date(2024, 1, 7)

    def test_week_crossing_a_month_boundary(self):
        assert week_start_for(date(2024, 3, 1)) == date(2024, 2, 25)

    def test_accepts_datetimes(self):
        assert week_start_for(datetime(2024, 1, 10, 23, 59)) == date(2024, 1, 7)

    @pytest.mark.parametrize("day,expected", [
        (date(2024, 1, 7), "sunday"),
        (date(2024, 1, 8), "monday"),
        (date(2024, 1, 13), "saturday"),
    ])
    def test_weekday_name(self, day, expected):
        assert weekday_name(day) == expected

    def test_day_index_starts_on_sunday(self):
        assert day_index(date(2024, 1, 7)) == 0
        assert day_index(date(2024, 1, 10)) == 3


class TestElapsedMinutes:
    def test_partial_minute_is_dropped(self):
        start = datetime(2024, 1, 8, 10, 0, 0)
        assert elapsed_minutes(start, datetime(2024, 1, 8, 10, 29, 59)) == 29

    def test_exact_minutes(self):
        start = datetime(2024, 1, 8, 10, 0, 0)
        assert elapsed_minutes(start, datetime(2024, 1, 8, 11, 30, 0)) == 90

    def test_never_negative(self):
        start = datetime(2024, 1, 8, 10, 0, 0)
        assert elapsed_minutes(start, datetime(2024, 1, 8, 9, 0, 0)) == 0

    def test_across_midnight(self):
        start = datetime(2024, 1, 8, 23, 30, 0)
        assert elapsed_minutes(start, datetime(2024, 1, 9, 0, 15, 30)) == 45


class TestHours:
    def test_minutes_to_hours_uses_real_division(self):
        assert minutes_to_hours(75) == Decimal("1.25")
        assert minutes_to_hours(20) == Decimal("0.33")
        assert minutes_to_hours(50) == Decimal("0.83")

    def test_added_hours_rounds_the_running_total(self):
        steps = [added_hours(0, 20), added_hours(20, 20), added_hours(40, 20)]
        assert steps == [Decimal("0.33"), Decimal("0.34"), Decimal("0.33")]
        assert sum(steps) == added_hours(0, 60) == Decimal("1.00")

    def test_to_hours_rounds_half_up(self):
        assert to_hours(Decimal("1.005")) == Decimal("1.01")
        assert to_hours(7.5) == Decimal("7.50")
        assert to_hours(None) == Decimal("0")

    def test_sum_hours_ignores_missing_days(self):
        assert sum_hours({"monday": Decimal("3"), "friday": Decimal("2.5")}) == Decimal("5.5")


@pytest.mark.parametrize("raw,expected", [
    ("John Doe", "johndoe"),
    ("José García", "josegarcia"),
    ("  jane ", "jane"),
    ("", ""),
])
def test_normalize_username(raw, expected):
    assert normalize_username(raw) == expected
