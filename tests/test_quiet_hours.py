"""Tests for quiet-hours window evaluation."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from dayflow.reminders.quiet_hours import is_quiet, next_instant_after_quiet_hours, parse_hhmm


def at(hour: int, minute: int = 0, day: int = 15) -> datetime:
    return datetime(2026, 1, day, hour, minute)


class TestParseHHMM:
    @pytest.mark.parametrize(
        "value,expected",
        [("07:00", 420), ("7:05", 425), ("00:00", 0), ("23:59:30", 1439), (" 22:00 ", 1320)],
    )
    def test_valid(self, value, expected):
        assert parse_hhmm(value) == expected

    @pytest.mark.parametrize("value", [None, "", "24:00", "12:60", "noon", "7", "07-00", "7:5"])
    def test_invalid_returns_none(self, value):
        assert parse_hhmm(value) is None


class TestIsQuiet:
    def test_same_day_window(self):
        assert is_quiet(at(12), "09:00", "17:00") is True
        assert is_quiet(at(9), "09:00", "17:00") is True
        assert is_quiet(at(17), "09:00", "17:00") is False
        assert is_quiet(at(8, 59), "09:00", "17:00") is False

    def test_window_spanning_midnight(self):
        assert is_quiet(at(23, 30), "22:00", "07:00") is True
        assert is_quiet(at(3), "22:00", "07:00") is True
        assert is_quiet(at(22), "22:00", "07:00") is True
        assert is_quiet(at(12), "22:00", "07:00") is False
        assert is_quiet(at(7), "22:00", "07:00") is False

    def test_missing_bound_disables(self):
        assert is_quiet(at(23), None, "07:00") is False
        assert is_quiet(at(23), "22:00", None) is False
        assert is_quiet(at(23), None, None) is False

    def test_malformed_bound_disables(self):
        assert is_quiet(at(23), "25:99", "07:00") is False
        assert is_quiet(at(3), "22:00", "seven") is False

    def test_equal_bounds_is_empty_window(self):
        assert is_quiet(at(22), "22:00", "22:00") is False

    def test_evaluated_in_local_timezone(self):
        new_york = ZoneInfo("America/New_York")
        # 08:00 UTC is 03:00 in New York
        assert is_quiet(at(8), "22:00", "07:00", new_york) is True
        assert is_quiet(at(8), "22:00", "07:00") is False

    def test_aware_instant_uses_its_own_clock(self):
        instant = datetime(2026, 1, 15, 23, 0, tzinfo=ZoneInfo("Europe/Berlin"))
        assert is_quiet(instant, "22:00", "07:00") is True


class TestNextInstantAfterQuietHours:
    def test_before_midnight_moves_to_next_day(self):
        assert next_instant_after_quiet_hours(at(23, 30), "22:00", "07:00") == at(7, day=16)

    def test_after_midnight_stays_same_day(self):
        assert next_instant_after_quiet_hours(at(3, day=16), "22:00", "07:00") == at(7, day=16)

    def test_same_day_window(self):
        assert next_instant_after_quiet_hours(at(12, 30), "12:00", "14:00") == at(14)

    def test_unusable_bounds_return_input(self):
        assert next_instant_after_quiet_hours(at(23), None, "07:00") == at(23)
        assert next_instant_after_quiet_hours(at(23), "22:00", "bogus") == at(23)

    def test_naive_utc_with_timezone(self):
        new_york = ZoneInfo("America/New_York")
        # 03:00 in New York; 07:00 local is 12:00 UTC
        assert next_instant_after_quiet_hours(at(8), "22:00", "07:00", new_york) == at(12)

    def test_aware_input_keeps_tzinfo(self):
        new_york = ZoneInfo("America/New_York")
        instant = datetime(2026, 1, 15, 8, 0, tzinfo=timezone.utc)
        result = next_instant_after_quiet_hours(instant, "22:00", "07:00", new_york)
        assert result.tzinfo == timezone.utc
        assert result == datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_spring_forward_night(self):
        new_york = ZoneInfo("America/New_York")
        # 01:30 EST on the night clocks jump; 07:00 is already EDT (UTC-4)
        instant = datetime(2026, 3, 8, 6, 30)
        assert next_instant_after_quiet_hours(instant, "22:00", "07:00", new_york) == datetime(2026, 3, 8, 11, 0)
