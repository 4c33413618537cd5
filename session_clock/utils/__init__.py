"""
Utility functions for the session clock.

Presentation helpers for durations and window labels.
"""

from session_clock.utils.formatters import (
    format_remaining,
    format_window_label,
    format_window_range,
)

__all__ = [
    "format_remaining",
    "format_window_label",
    "format_window_range",
]
