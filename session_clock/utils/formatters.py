"""
Formatting utilities for session windows.

Presentation helpers for countdowns and window labels shown to users.
"""

from datetime import timedelta

from session_clock.core.models import SessionWindow


def format_remaining(remaining: timedelta) -> str:
    """
    Format a countdown as HH:MM:SS.

    Args:
        remaining: Time left; negative values are clamped to zero

    Returns:
        Formatted string

    Example:
        >>> format_remaining(timedelta(hours=1, minutes=15))
        '01:15:00'
    """
    total = max(int(remaining.total_seconds()), 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_window_label(index: int) -> str:
    """
    Format a window number for display.

    Example:
        >>> format_window_label(3)
        'Session-3'
    """
    return f"Session-{index}"


def format_window_range(window: SessionWindow) -> str:
    """Format a window as its local ``HH:MM-HH:MM`` span."""
    return f"{window.start:%H:%M}-{window.end:%H:%M}"
