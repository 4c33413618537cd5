"""
Tests for the FIFO pair matcher.

The matcher is pure, so events are plain dataclasses.
"""

from app.models.enums import PackageTier, PairSide
from app.services.pairing import MatchedPair, match_fifo

LEFT = PairSide.LEFT
RIGHT = PairSide.RIGHT


class TestMatchFifo:
    """Tests for match_fifo."""

    def test_earliest_left_pairs_with_right(self, make_event) -> None:
        """Two lefts and one right form one pair with the oldest left."""
        l1 = make_event(LEFT, minute=0)
        l2 = make_event(LEFT, minute=10)
        r1 = make_event(RIGHT, minute=20)

        pairs = match_fifo([l2, r1, l1])

        assert pairs == [MatchedPair(PackageTier.SILVER, l1.id, r1.id)]

    def test_equal_timestamps_break_ties_by_id(self, make_event) -> None:
        l1 = make_event(LEFT, minute=5)
        l2 = make_event(LEFT, minute=5)
        r1 = make_event(RIGHT, minute=5)

        pairs = match_fifo([l2, l1, r1])

        assert pairs[0].left_event_id == l1.id

    def test_tiers_never_mix(self, make_event) -> None:
        left_silver = make_event(LEFT, PackageTier.SILVER)
        right_gold = make_event(RIGHT, PackageTier.GOLD)

        assert match_fifo([left_silver, right_gold]) == []

    def test_pairs_ordered_by_tier(self, make_event) -> None:
        events = [
            make_event(LEFT, PackageTier.RUBY),
            make_event(RIGHT, PackageTier.RUBY),
            make_event(LEFT, PackageTier.SILVER),
            make_event(RIGHT, PackageTier.SILVER),
        ]

        pairs = match_fifo(events)

        assert [p.tier for p in pairs] == [PackageTier.SILVER, PackageTier.RUBY]

    def test_one_sided_events_stay_pending(self, make_event) -> None:
        events = [make_event(LEFT, minute=i) for i in range(3)]

        assert match_fifo(events) == []

    def test_capping_limits_pairs_per_tier(self, make_event) -> None:
        events = [make_event(side, minute=i) for i in range(3) for side in (LEFT, RIGHT)]

        pairs = match_fifo(events, capping=1)

        assert len(pairs) == 1
        assert pairs[0].left_event_id == events[0].id

    def test_capping_counts_already_matched(self, make_event) -> None:
        events = [make_event(LEFT), make_event(RIGHT)]

        pairs = match_fifo(
            events, capping=1, already_matched={PackageTier.SILVER: 1}
        )

        assert pairs == []

    def test_no_events(self) -> None:
        assert match_fifo([]) == []
