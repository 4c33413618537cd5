"""
Session clock.

Standalone package partitioning each calendar day into 8 fixed,
contiguous evaluation windows.

Example:
    >>> from datetime import datetime, UTC
    >>> from session_clock import SessionClock, format_remaining
    >>>
    >>> clock = SessionClock()
    >>> status = clock.current_window(datetime(2025, 1, 1, 7, 0, tzinfo=UTC))
    >>> print(f"Session {status.index}, {format_remaining(status.remaining)} left")
    Session 1, 01:15:00 left
"""

from session_clock.constants import (
    DEFAULT_DAY_END,
    DEFAULT_START_TIMES,
    DEFAULT_TIMEZONE,
    DEFAULT_WINDOW_LENGTH,
    WINDOWS_PER_DAY,
)
from session_clock.core.clock import SessionClock
from session_clock.core.models import (
    SessionSchedule,
    SessionWindow,
    UpcomingWindow,
    WindowStatus,
    parse_clock_time,
)
from session_clock.utils import (
    format_remaining,
    format_window_label,
    format_window_range,
)


__version__ = "1.0.0"
__all__ = [
    # Core
    "SessionClock",
    # Models
    "SessionSchedule",
    "SessionWindow",
    "WindowStatus",
    "UpcomingWindow",
    "parse_clock_time",
    # Constants
    "DEFAULT_START_TIMES",
    "DEFAULT_DAY_END",
    "DEFAULT_TIMEZONE",
    "DEFAULT_WINDOW_LENGTH",
    "WINDOWS_PER_DAY",
    # Formatters
    "format_remaining",
    "format_window_label",
    "format_window_range",
]
