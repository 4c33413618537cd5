"""
Default schedule for the session clock.

Eight contiguous daily windows of 2h15m each, opening at 06:00 and
closing at midnight.
"""

from datetime import timedelta

# Number of evaluation windows per calendar day
WINDOWS_PER_DAY = 8

# Minutes in a full day; "24:00" parses to this value
MINUTES_PER_DAY = 24 * 60

# Window start times (local wall clock, HH:MM)
DEFAULT_START_TIMES: tuple[str, ...] = (
    "06:00",
    "08:15",
    "10:30",
    "12:45",
    "15:00",
    "17:15",
    "19:30",
    "21:45",
)

# End of the 8th window (midnight of the following day)
DEFAULT_DAY_END = "24:00"

# IANA timezone the wall-clock boundaries are expressed in
DEFAULT_TIMEZONE = "UTC"

DEFAULT_WINDOW_LENGTH = timedelta(hours=2, minutes=15)
