"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Lightweight leg events for the matcher
- Custom session schedules
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import pytest

from app.models.enums import PackageTier, PairSide
from session_clock import SessionSchedule


@dataclass
class FakeEvent:
    """Stand-in for a PairEvent row."""

    id: int
    side: PairSide
    tier: PackageTier
    created_at: datetime


@pytest.fixture
def make_event():
    """
    Build leg events with increasing ids.

    Returns:
        Callable(side, tier=SILVER, minute=0) -> FakeEvent
    """
    counter = {"id": 0}
    base = datetime(2025, 3, 10, 6, 0, tzinfo=UTC)

    def _make(side: PairSide, tier: PackageTier = PackageTier.SILVER, minute: int = 0) -> FakeEvent:
        counter["id"] += 1
        return FakeEvent(
            id=counter["id"],
            side=side,
            tier=tier,
            created_at=base + timedelta(minutes=minute),
        )

    return _make


@pytest.fixture
def full_day_schedule() -> SessionSchedule:
    """Eight 3-hour windows tiling the whole day."""
    return SessionSchedule(
        start_times=("00:00", "03:00", "06:00", "09:00", "12:00", "15:00", "18:00", "21:00"),
        day_end="24:00",
    )
