"""Tests for duration formatting and calendar windows."""

from datetime import timedelta, timezone

import pytest

from shiftclock.timeutil import (
    WEEK_MS,
    Window,
    chat_timestamp,
    current_month_range,
    current_week_range,
    format_duration,
    format_hours,
    week_range_for_offset,
)

from conftest import NOW, utc_ms


class TestFormatting:
    @pytest.mark.parametrize(
        "ms, expected",
        [
            (0, "0h 0m 0s"),
            (999, "0h 0m 0s"),
            (61_000, "0h 1m 1s"),
            (3_723_000, "1h 2m 3s"),
            (90_000_000, "25h 0m 0s"),
        ],
    )
    def test_format_duration(self, ms, expected):
        assert format_duration(ms) == expected

    @pytest.mark.parametrize(
        "ms, expected",
        [(0, "0.00"), (5_400_000, "1.50"), (3_600_000 * 12, "12.00"), (60_000, "0.02")],
    )
    def test_format_hours(self, ms, expected):
        assert format_hours(ms) == expected

    def test_chat_timestamp(self):
        assert chat_timestamp(1_700_000_000_999) == "<t:1700000000:f>"
        assert chat_timestamp(1_700_000_000_000, "R") == "<t:1700000000:R>"


class TestWindow:
    def test_half_open(self):
        window = Window(100, 200)
        assert window.contains(100)
        assert window.contains(199)
        assert not window.contains(200)
        assert not window.contains(99)


class TestMonthRange:
    def test_current_month(self):
        assert current_month_range(NOW) == Window(
            utc_ms(2024, 5, 1), utc_ms(2024, 6, 1)
        )

    def test_december_rolls_year(self):
        now = utc_ms(2023, 12, 31, 23, 59)
        assert current_month_range(now) == Window(
            utc_ms(2023, 12, 1), utc_ms(2024, 1, 1)
        )

    def test_timezone_shifts_boundary(self):
        """Midnight UTC on the 1st is still the previous month at UTC-5."""
        tz = timezone(timedelta(hours=-5))
        now = utc_ms(2024, 6, 1, 2, 0)

        start, end = current_month_range(now, tz)
        assert start == utc_ms(2024, 5, 1, 5, 0)
        assert end == utc_ms(2024, 6, 1, 5, 0)


class TestWeekRange:
    def test_current_week_starts_sunday(self):
        assert current_week_range(NOW) == Window(
            utc_ms(2024, 5, 12), utc_ms(2024, 5, 19)
        )

    def test_on_sunday(self):
        now = utc_ms(2024, 5, 12, 0, 0)
        assert current_week_range(now).start_ms == now

    def test_on_saturday(self):
        now = utc_ms(2024, 5, 18, 23, 59)
        assert current_week_range(now) == Window(
            utc_ms(2024, 5, 12), utc_ms(2024, 5, 19)
        )

    @pytest.mark.parametrize("day", range(12, 19))
    def test_contains_now(self, day):
        now = utc_ms(2024, 5, day, 9, 30)
        window = current_week_range(now)
        assert window.contains(now)
        assert window.end_ms - window.start_ms == WEEK_MS

    def test_offset_zero_is_current(self):
        assert week_range_for_offset(0, NOW) == current_week_range(NOW)

    @pytest.mark.parametrize("day", range(12, 19))
    def test_offset_one_is_exactly_one_week_back(self, day):
        now = utc_ms(2024, 5, day, 15)
        start, end = current_week_range(now)
        assert week_range_for_offset(1, now) == Window(
            start - 604_800_000, end - 604_800_000
        )

    def test_offsets_tile(self):
        for offset in range(1, 8):
            newer = week_range_for_offset(offset - 1, NOW)
            older = week_range_for_offset(offset, NOW)
            assert older.end_ms == newer.start_ms

    def test_negative_offset(self):
        with pytest.raises(ValueError):
            week_range_for_offset(-1, NOW)
