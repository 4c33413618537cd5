"""
Core session clock functionality.

Contains the schedule model, derived window models and the clock itself.
"""

from session_clock.core.clock import SessionClock
from session_clock.core.models import (
    SessionSchedule,
    SessionWindow,
    UpcomingWindow,
    WindowStatus,
)

__all__ = [
    "SessionClock",
    "SessionSchedule",
    "SessionWindow",
    "UpcomingWindow",
    "WindowStatus",
]
