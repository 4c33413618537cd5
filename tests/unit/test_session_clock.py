"""
Tests for the standalone session clock.

Tests the session_clock package without database dependencies.
"""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from session_clock import (
    DEFAULT_START_TIMES,
    DEFAULT_WINDOW_LENGTH,
    SessionClock,
    SessionSchedule,
    format_remaining,
    format_window_label,
    format_window_range,
    parse_clock_time,
)


def at(hour: int, minute: int = 0, day: int = 10) -> datetime:
    return datetime(2025, 3, day, hour, minute, tzinfo=UTC)


class TestParseClockTime:
    """Tests for HH:MM parsing."""

    def test_parse_regular_time(self) -> None:
        assert parse_clock_time("08:15") == 8 * 60 + 15

    def test_parse_midnight_end(self) -> None:
        assert parse_clock_time("24:00") == 1440

    @pytest.mark.parametrize("value", ["24:01", "25:00", "10:60", "abc", "10", ""])
    def test_parse_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_clock_time(value)


class TestSessionSchedule:
    """Tests for schedule validation."""

    def test_default_schedule(self) -> None:
        schedule = SessionSchedule()
        assert schedule.start_times == DEFAULT_START_TIMES
        assert schedule.window_length == DEFAULT_WINDOW_LENGTH
        assert schedule.covers_full_day is False

    def test_full_day_schedule(self, full_day_schedule: SessionSchedule) -> None:
        assert full_day_schedule.covers_full_day is True
        assert full_day_schedule.window_length == timedelta(hours=3)

    def test_wrong_window_count_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionSchedule(start_times=DEFAULT_START_TIMES[:7])

    def test_unequal_windows_rejected(self) -> None:
        start_times = ("06:00", "08:00", "10:30", "12:45", "15:00", "17:15", "19:30", "21:45")
        with pytest.raises(ValidationError):
            SessionSchedule(start_times=start_times)

    def test_decreasing_boundaries_rejected(self) -> None:
        start_times = tuple(reversed(DEFAULT_START_TIMES))
        with pytest.raises(ValidationError):
            SessionSchedule(start_times=start_times)

    def test_unknown_timezone_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionSchedule(timezone="Mars/Olympus_Mons")


class TestCurrentWindow:
    """Tests for SessionClock.current_window."""

    def test_inside_first_window(self, clock: SessionClock) -> None:
        """07:00 falls in window 1 (06:00-08:15) with 1h15m left."""
        status = clock.current_window(at(7, 0))

        assert status is not None
        assert status.index == 1
        assert status.remaining == timedelta(hours=1, minutes=15)

    def test_start_boundary_is_inclusive(self, clock: SessionClock) -> None:
        status = clock.current_window(at(8, 15))

        assert status.index == 2
        assert status.remaining == timedelta(hours=2, minutes=15)

    def test_last_window_runs_to_midnight(self, clock: SessionClock) -> None:
        status = clock.current_window(at(23, 59))

        assert status.index == 8
        assert status.end == at(0, 0, day=11)
        assert status.remaining == timedelta(minutes=1)

    def test_gap_before_first_window(self, clock: SessionClock) -> None:
        assert clock.current_window(at(3, 0)) is None

    def test_naive_datetime_rejected(self, clock: SessionClock) -> None:
        with pytest.raises(ValueError):
            clock.current_window(datetime(2025, 3, 10, 7, 0))

    def test_other_offset_input(self, clock: SessionClock) -> None:
        """Inputs in another offset are compared in absolute time."""
        now = datetime(2025, 3, 10, 9, 0, tzinfo=timezone(timedelta(hours=2)))

        status = clock.current_window(now)

        assert status.index == 1
        assert status.remaining == timedelta(hours=1, minutes=15)

    def test_local_schedule_timezone(self) -> None:
        """Boundaries are wall-clock times of the schedule timezone."""
        clock = SessionClock(SessionSchedule(timezone="Asia/Kolkata"))
        # 01:30 UTC is 07:00 IST
        status = clock.current_window(at(1, 30))

        assert status.index == 1
        assert status.remaining == timedelta(hours=1, minutes=15)

    def test_full_day_schedule_is_exhaustive(self, full_day_schedule: SessionSchedule) -> None:
        """Every minute of the day lies in exactly one window."""
        clock = SessionClock(full_day_schedule)
        windows = clock.windows_for_day(date(2025, 3, 10))
        moment = at(0, 0)

        while moment < at(0, 0, day=11):
            status = clock.current_window(moment)
            assert status is not None
            assert sum(1 for w in windows if w.contains(moment)) == 1
            moment += timedelta(minutes=7)


class TestNextWindow:
    """Tests for SessionClock.next_window."""

    def test_next_from_gap(self, clock: SessionClock) -> None:
        upcoming = clock.next_window(at(3, 0))

        assert upcoming.index == 1
        assert upcoming.start == at(6, 0)
        assert upcoming.remaining == timedelta(hours=3)

    def test_next_is_strictly_after(self, clock: SessionClock) -> None:
        upcoming = clock.next_window(at(6, 0))

        assert upcoming.index == 2
        assert upcoming.start == at(8, 15)

    def test_next_rolls_over_to_tomorrow(self, clock: SessionClock) -> None:
        upcoming = clock.next_window(at(22, 0))

        assert upcoming.index == 1
        assert upcoming.start == at(6, 0, day=11)
        assert upcoming.remaining == timedelta(hours=8)


class TestClosedWindows:
    """Tests for closed window lookups."""

    def test_last_closed_window(self, clock: SessionClock) -> None:
        window = clock.last_closed_window(at(9, 0))

        assert window.index == 1
        assert window.end == at(8, 15)

    def test_window_closed_at_its_end(self, clock: SessionClock) -> None:
        assert clock.last_closed_window(at(8, 15)).index == 1

    def test_last_closed_window_from_gap(self, clock: SessionClock) -> None:
        window = clock.last_closed_window(at(3, 0))

        assert window.index == 8
        assert window.start == at(21, 45, day=9)

    def test_closed_windows_of_one_day(self, clock: SessionClock) -> None:
        windows = clock.closed_windows_between(at(0, 0), at(0, 0, day=11))

        assert [w.index for w in windows] == [1, 2, 3, 4, 5, 6, 7, 8]
        assert windows[0].start == at(6, 0)

    def test_closed_windows_half_open_range(self, clock: SessionClock) -> None:
        windows = clock.closed_windows_between(at(8, 15), at(12, 45))

        assert [w.index for w in windows] == [2, 3]

    def test_closed_windows_empty_range(self, clock: SessionClock) -> None:
        assert clock.closed_windows_between(at(9, 0), at(9, 0)) == []

    def test_windows_for_day_are_contiguous(self, clock: SessionClock) -> None:
        windows = clock.windows_for_day(date(2025, 3, 10))

        assert len(windows) == 8
        for current, following in zip(windows, windows[1:]):
            assert current.end == following.start
        assert {w.length for w in windows} == {timedelta(hours=2, minutes=15)}

    def test_day_start(self, clock: SessionClock) -> None:
        assert clock.day_start(at(14, 0)) == at(6, 0)


class TestFormatters:
    """Tests for presentation helpers."""

    def test_format_remaining(self) -> None:
        assert format_remaining(timedelta(hours=1, minutes=15)) == "01:15:00"

    def test_format_remaining_clamps_negative(self) -> None:
        assert format_remaining(timedelta(seconds=-5)) == "00:00:00"

    def test_format_window_label(self) -> None:
        assert format_window_label(3) == "Session-3"

    def test_format_window_range(self, clock: SessionClock) -> None:
        windows = clock.windows_for_day(date(2025, 3, 10))

        assert format_window_range(windows[0]) == "06:00-08:15"
        assert format_window_range(windows[-1]) == "21:45-00:00"
