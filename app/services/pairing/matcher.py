"""
FIFO pair matcher.

Pure matching step of the pair classification: no I/O, no clock. Given the
eligible pending events of one participant it decides which left/right
events pair up.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from app.config.business_constants import PACKAGE_TIER_ORDER
from app.models.enums import PackageTier, PairSide


class LegEvent(Protocol):
    """Attributes the matcher reads from an event."""

    id: int
    side: PairSide
    tier: PackageTier
    created_at: datetime


@dataclass(frozen=True)
class MatchedPair:
    """One left event paired with one right event of the same tier."""

    tier: PackageTier
    left_event_id: int
    right_event_id: int


def fifo_key(event: LegEvent) -> tuple[datetime, int]:
    """Sort key: oldest first, sequence breaks ties."""
    return event.created_at, event.id


def match_fifo(
    events: Iterable[LegEvent],
    capping: int | None = None,
    already_matched: Mapping[PackageTier, int] | None = None,
) -> list[MatchedPair]:
    """
    Pair the oldest left event with the oldest right event, per tier.

    Args:
        events: Pending events, in any order
        capping: Max pairs per tier (None = unlimited)
        already_matched: Pairs per tier already counted against the cap

    Returns:
        Pairs in tier order, oldest pair first within a tier

    Example:
        Left [L1, L2] and right [R1] of one tier yield a single pair
        (L1, R1); L2 stays pending.
    """
    already_matched = already_matched or {}
    by_tier: dict[PackageTier, dict[PairSide, list[LegEvent]]] = {}
    for event in events:
        sides = by_tier.setdefault(event.tier, {PairSide.LEFT: [], PairSide.RIGHT: []})
        sides[event.side].append(event)

    pairs: list[MatchedPair] = []
    for tier in PACKAGE_TIER_ORDER:
        sides = by_tier.get(tier)
        if sides is None:
            continue

        lefts = sorted(sides[PairSide.LEFT], key=fifo_key)
        rights = sorted(sides[PairSide.RIGHT], key=fifo_key)
        count = min(len(lefts), len(rights))
        if capping is not None:
            count = min(count, max(capping - already_matched.get(tier, 0), 0))

        pairs.extend(
            MatchedPair(tier=tier, left_event_id=left.id, right_event_id=right.id)
            for left, right in zip(lefts[:count], rights[:count])
        )

    return pairs
