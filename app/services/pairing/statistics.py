"""
Pairing statistics module.

Read-only views over leg events: the pending queue, per-tier red/green
summaries and the session status shown to participants.
"""

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import PACKAGE_TIER_ORDER
from app.models.enums import PackageTier
from app.models.pair_event import PairEvent
from app.repositories.pair_event_repository import PairEventRepository
from app.services.pairing.matcher import fifo_key
from session_clock import SessionClock, UpcomingWindow, WindowStatus


@dataclass(frozen=True)
class TierSummary:
    """Event counts of one tier."""

    matched: int
    pending: int

    @property
    def pairs(self) -> int:
        return self.matched // 2


@dataclass(frozen=True)
class SessionStatus:
    """Where ``now`` sits in the daily schedule."""

    current: WindowStatus | None
    next: UpcomingWindow
    pairs_today: int

    @property
    def in_session(self) -> bool:
        return self.current is not None


class PairingStatisticsManager:
    """Provides pairing queues and summaries."""

    def __init__(self, session: AsyncSession, clock: SessionClock) -> None:
        """Initialize statistics manager."""
        self.session = session
        self.clock = clock
        self.event_repo = PairEventRepository(session)

    async def pending_queue(self, participant_id: str) -> list[PairEvent]:
        """
        Get pending events grouped by tier, oldest first within a tier.

        Args:
            participant_id: Owner of the legs

        Returns:
            Pending events
        """
        pending = await self.event_repo.get_pending(participant_id)
        order = {tier: i for i, tier in enumerate(PACKAGE_TIER_ORDER)}
        return sorted(pending, key=lambda e: (order[e.tier], *fifo_key(e)))

    async def summary(self, participant_id: str) -> dict[PackageTier, TierSummary]:
        """
        Count matched and pending events per tier.

        Every tier is present, with zero counts when it has no events.
        """
        counts = await self.event_repo.count_by_tier(participant_id)
        return {
            tier: TierSummary(
                matched=counts.get((tier, True), 0),
                pending=counts.get((tier, False), 0),
            )
            for tier in PACKAGE_TIER_ORDER
        }

    async def session_status(
        self, now: datetime, participant_id: str | None = None
    ) -> SessionStatus:
        """
        Describe the current and next window at ``now``.

        Args:
            now: Aware moment
            participant_id: Restrict the pair count to one owner

        Returns:
            Session status with pairs matched by today's windows
        """
        pairs_today = await self.event_repo.count_pairs_matched_since(
            self.clock.day_start(now), participant_id=participant_id
        )
        return SessionStatus(
            current=self.clock.current_window(now),
            next=self.clock.next_window(now),
            pairs_today=pairs_today,
        )
