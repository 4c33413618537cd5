"""Pydantic models for the session clock."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from session_clock.constants import (
    DEFAULT_DAY_END,
    DEFAULT_START_TIMES,
    DEFAULT_TIMEZONE,
    MINUTES_PER_DAY,
    WINDOWS_PER_DAY,
)


def parse_clock_time(value: str) -> int:
    """
    Parse a wall-clock "HH:MM" string into minutes since midnight.

    "24:00" is accepted and maps to the end of the day.

    Args:
        value: Time of day string

    Returns:
        Minutes since midnight (0..1440)

    Raises:
        ValueError: If the string is malformed or out of range
    """
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time of day: {value!r}, expected HH:MM") from None

    if not 0 <= minutes < 60 or not 0 <= hours <= 24:
        raise ValueError(f"Invalid time of day: {value!r}")
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        raise ValueError(f"Time of day past midnight: {value!r}")
    return total


class SessionSchedule(BaseModel):
    """Fixed daily schedule of evaluation windows.

    Window ``i`` spans ``[start_times[i], start_times[i + 1])``; the last
    window spans ``[start_times[-1], day_end)``. Windows are contiguous by
    construction and must all have the same length.
    """

    model_config = ConfigDict(frozen=True)

    start_times: tuple[str, ...] = Field(
        default=DEFAULT_START_TIMES,
        description="Window start times, HH:MM local wall clock",
    )
    day_end: str = Field(
        default=DEFAULT_DAY_END,
        description="End of the last window, HH:MM (24:00 = midnight)",
    )
    timezone: str = Field(
        default=DEFAULT_TIMEZONE,
        description="IANA timezone of the wall-clock boundaries",
    )

    @field_validator("start_times")
    @classmethod
    def validate_start_times(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate window count and format."""
        if len(v) != WINDOWS_PER_DAY:
            raise ValueError(
                f"Schedule must define exactly {WINDOWS_PER_DAY} windows, got {len(v)}"
            )
        for item in v:
            parse_clock_time(item)
        return v

    @field_validator("day_end")
    @classmethod
    def validate_day_end(cls, v: str) -> str:
        """Validate day end format."""
        parse_clock_time(v)
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate that the timezone is known."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v!r}") from None
        return v

    @model_validator(mode="after")
    def validate_boundaries(self) -> "SessionSchedule":
        """Validate ordering and equal window lengths."""
        boundaries = self.boundaries
        lengths = [b - a for a, b in zip(boundaries, boundaries[1:])]
        if any(length <= 0 for length in lengths):
            raise ValueError("Window boundaries must be strictly increasing")
        if len(set(lengths)) != 1:
            raise ValueError("All windows must have the same length")
        return self

    @property
    def boundaries(self) -> list[int]:
        """All nine boundaries in minutes since midnight."""
        return [parse_clock_time(t) for t in self.start_times] + [
            parse_clock_time(self.day_end)
        ]

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @property
    def window_length(self) -> timedelta:
        boundaries = self.boundaries
        return timedelta(minutes=boundaries[1] - boundaries[0])

    @property
    def covers_full_day(self) -> bool:
        """True when the windows tile all 24 hours with no gap."""
        boundaries = self.boundaries
        return boundaries[0] == 0 and boundaries[-1] == MINUTES_PER_DAY


class SessionWindow(BaseModel):
    """One dated ``[start, end)`` window of the daily schedule."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, le=WINDOWS_PER_DAY, description="Window number (1-8)")
    start: datetime = Field(..., description="Window start (aware)")
    end: datetime = Field(..., description="Window end, exclusive (aware)")

    def contains(self, moment: datetime) -> bool:
        """Check whether ``moment`` falls inside this window."""
        at = moment.astimezone(UTC)
        return self.start.astimezone(UTC) <= at < self.end.astimezone(UTC)

    def is_closed(self, as_of: datetime) -> bool:
        """Check whether the window has fully elapsed at ``as_of``."""
        return as_of.astimezone(UTC) >= self.end.astimezone(UTC)

    @property
    def length(self) -> timedelta:
        return self.end.astimezone(UTC) - self.start.astimezone(UTC)


class WindowStatus(BaseModel):
    """The window a moment falls inside, with time left until it closes."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, le=WINDOWS_PER_DAY)
    start: datetime
    end: datetime
    remaining: timedelta = Field(..., description="end - now, never negative")


class UpcomingWindow(BaseModel):
    """The earliest window opening after a given moment."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=1, le=WINDOWS_PER_DAY)
    start: datetime
    remaining: timedelta = Field(..., description="start - now, never negative")
