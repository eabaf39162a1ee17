"""Tests for mealhub.services.delivery_schedule."""

from datetime import date, datetime, timedelta

import pytest

from mealhub.services.delivery_schedule import (
    DAY_INDEX,
    DEFAULT_DELIVERY_DAYS,
    day_index,
    next_delivery_date,
    parse_calendar_date,
)
from mealhub.utils.exceptions import InvalidArgument

SUNDAY = date(2024, 1, 7)
ANCHORS = [SUNDAY + timedelta(days=offset) for offset in range(7)]


# ------------------------------------------------------------------ #
#  next_delivery_date                                                  #
# ------------------------------------------------------------------ #


class TestNextDeliveryDate:
    @pytest.mark.parametrize("week_start", ANCHORS, ids=lambda d: d.strftime("%A"))
    @pytest.mark.parametrize("day", list(DAY_INDEX))
    def test_every_anchor_and_target(self, week_start, day):
        result = next_delivery_date(week_start, day)
        assert week_start < result <= week_start + timedelta(days=7)
        assert day_index(result) == DAY_INDEX[day]

    def test_same_weekday_rolls_a_full_week(self):
        monday = date(2024, 1, 1)
        assert next_delivery_date(monday, "monday") == date(2024, 1, 8)

    def test_later_weekday_stays_in_week(self):
        assert next_delivery_date(date(2024, 1, 1), "thursday") == date(2024, 1, 4)

    def test_earlier_weekday_moves_to_next_week(self):
        friday = date(2024, 1, 5)
        assert next_delivery_date(friday, "tuesday") == date(2024, 1, 9)

    def test_sunday_target(self):
        assert next_delivery_date(date(2024, 1, 6), "sunday") == date(2024, 1, 7)
        assert next_delivery_date(SUNDAY, "sunday") == date(2024, 1, 14)

    def test_day_name_is_case_insensitive(self):
        assert next_delivery_date(SUNDAY, "MONDAY") == date(2024, 1, 8)
        assert next_delivery_date(SUNDAY, " Friday ") == date(2024, 1, 12)

    def test_datetime_anchor_keeps_time(self):
        anchor = datetime(2024, 1, 1, 9, 30)
        assert next_delivery_date(anchor, "wednesday") == datetime(2024, 1, 3, 9, 30)

    def test_crosses_month_and_year(self):
        assert next_delivery_date(date(2023, 12, 29), "monday") == date(2024, 1, 1)

    def test_past_last_calendar_day_raises(self):
        with pytest.raises(InvalidArgument, match="last supported calendar date"):
            next_delivery_date(date(9999, 12, 31), "monday")

    def test_unknown_day_raises(self):
        with pytest.raises(InvalidArgument, match="Invalid delivery day"):
            next_delivery_date(SUNDAY, "funday")

    def test_missing_arguments_raise(self):
        with pytest.raises(InvalidArgument):
            next_delivery_date(None, "monday")
        with pytest.raises(InvalidArgument):
            next_delivery_date(SUNDAY, "")


class TestDayIndex:
    def test_sunday_is_zero(self):
        assert day_index("sunday") == 0
        assert day_index(SUNDAY) == 0

    def test_saturday_is_six(self):
        assert day_index("saturday") == 6
        assert day_index(date(2024, 1, 13)) == 6

    def test_non_string_raises(self):
        with pytest.raises(InvalidArgument):
            day_index(3)

    def test_default_days_are_weekdays(self):
        assert DEFAULT_DELIVERY_DAYS == ("monday", "tuesday", "wednesday", "thursday", "friday")


# ------------------------------------------------------------------ #
#  parse_calendar_date                                                 #
# ------------------------------------------------------------------ #


class TestParseCalendarDate:
    def test_date_string(self):
        assert parse_calendar_date("2024-01-15") == date(2024, 1, 15)

    def test_datetime_string_drops_time(self):
        assert parse_calendar_date("2024-01-15T18:45:00Z") == date(2024, 1, 15)

    def test_date_and_datetime_objects(self):
        assert parse_calendar_date(date(2024, 2, 1)) == date(2024, 2, 1)
        assert parse_calendar_date(datetime(2024, 2, 1, 8, 0)) == date(2024, 2, 1)

    def test_garbage_raises(self):
        with pytest.raises(InvalidArgument, match="ISO-8601"):
            parse_calendar_date("next tuesday", "startDate")

    def test_missing_raises(self):
        with pytest.raises(InvalidArgument, match="startDate is required"):
            parse_calendar_date(None, "startDate")
