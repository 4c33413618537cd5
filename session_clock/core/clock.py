"""
Pure session clock.

Maps wall-clock time onto the fixed daily schedule of evaluation windows.
The clock holds no mutable state: every method is a function of the
injected ``now`` and the schedule, which keeps it deterministic in tests.
"""

from datetime import UTC, date, datetime, time, timedelta

from session_clock.constants import MINUTES_PER_DAY, WINDOWS_PER_DAY
from session_clock.core.models import (
    SessionSchedule,
    SessionWindow,
    UpcomingWindow,
    WindowStatus,
)


ONE_DAY = timedelta(days=1)


def _utc(moment: datetime) -> datetime:
    return moment.astimezone(UTC)


def _require_aware(moment: datetime) -> None:
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise ValueError("Session clock requires timezone-aware datetimes")


class SessionClock:
    """
    Session window calculator.

    Example:
        >>> from datetime import datetime, UTC
        >>> clock = SessionClock()
        >>> status = clock.current_window(datetime(2025, 1, 1, 7, 0, tzinfo=UTC))
        >>> status.index, status.remaining
        (1, datetime.timedelta(seconds=4500))
    """

    def __init__(self, schedule: SessionSchedule | None = None) -> None:
        self.schedule = schedule or SessionSchedule()
        self._tz = self.schedule.tzinfo
        self._boundaries = self.schedule.boundaries

    def _at(self, day: date, minutes: int) -> datetime:
        if minutes == MINUTES_PER_DAY:
            return datetime.combine(day + ONE_DAY, time(0, 0), tzinfo=self._tz)
        return datetime.combine(
            day, time(minutes // 60, minutes % 60), tzinfo=self._tz
        )

    def windows_for_day(self, day: date) -> list[SessionWindow]:
        """
        Build the dated windows of one calendar day.

        Args:
            day: Local calendar date

        Returns:
            Eight windows in schedule order
        """
        return [
            SessionWindow(
                index=i + 1,
                start=self._at(day, self._boundaries[i]),
                end=self._at(day, self._boundaries[i + 1]),
            )
            for i in range(WINDOWS_PER_DAY)
        ]

    def local_date(self, moment: datetime) -> date:
        """Calendar date of ``moment`` in the schedule timezone."""
        _require_aware(moment)
        return moment.astimezone(self._tz).date()

    def current_window(self, now: datetime) -> WindowStatus | None:
        """
        Find the window ``now`` falls inside.

        Args:
            now: Aware moment

        Returns:
            Window status, or None when ``now`` lies in a gap of the schedule
        """
        today = self.local_date(now)
        for window in self.windows_for_day(today):
            if window.contains(now):
                return WindowStatus(
                    index=window.index,
                    start=window.start,
                    end=window.end,
                    remaining=max(_utc(window.end) - _utc(now), timedelta(0)),
                )
        return None

    def next_window(self, now: datetime) -> UpcomingWindow:
        """
        Find the earliest window starting strictly after ``now``.

        Rolls over to the first window of the following day once the last
        window of today has opened.
        """
        today = self.local_date(now)
        for day in (today, today + ONE_DAY):
            for window in self.windows_for_day(day):
                if _utc(window.start) > _utc(now):
                    return UpcomingWindow(
                        index=window.index,
                        start=window.start,
                        remaining=_utc(window.start) - _utc(now),
                    )
        # Unreachable: tomorrow always has a window after now
        raise RuntimeError("Schedule has no upcoming window")

    def last_closed_window(self, now: datetime) -> SessionWindow:
        """
        Find the most recent window that has fully elapsed at ``now``.

        Args:
            now: Aware moment

        Returns:
            Latest window with ``end <= now``
        """
        today = self.local_date(now)
        for day in (today, today - ONE_DAY):
            for window in reversed(self.windows_for_day(day)):
                if window.is_closed(now):
                    return window
        raise RuntimeError("Schedule has no closed window")

    def closed_windows_between(
        self, after: datetime, until: datetime
    ) -> list[SessionWindow]:
        """
        List windows whose end lies in ``(after, until]``, oldest first.

        Used by the scheduler to evaluate every window elapsed since the
        last checkpoint.
        """
        if _utc(until) <= _utc(after):
            return []

        # A window of day d can end on d + 1, so start one day early
        day = self.local_date(after) - ONE_DAY
        last_day = self.local_date(until)
        windows: list[SessionWindow] = []
        while day <= last_day:
            for window in self.windows_for_day(day):
                if _utc(after) < _utc(window.end) <= _utc(until):
                    windows.append(window)
            day += ONE_DAY
        return windows

    def day_start(self, now: datetime) -> datetime:
        """Start of the first window of ``now``'s local day."""
        return self._at(self.local_date(now), self._boundaries[0])
