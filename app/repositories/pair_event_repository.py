"""
Pair event repository.

Data access layer for leg events and their red/green classification.
"""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import PackageTier
from app.models.pair_event import PairEvent
from app.repositories.base import BaseRepository


# FIFO order: oldest first, sequence breaks timestamp ties
FIFO_ORDER = (PairEvent.created_at.asc(), PairEvent.id.asc())


class PairEventRepository(BaseRepository[PairEvent]):
    """Pair event repository with pending-queue and matching queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize pair event repository."""
        super().__init__(PairEvent, session)

    async def get_pending(
        self,
        participant_id: str,
        created_before: datetime | None = None,
    ) -> list[PairEvent]:
        """
        Get pending (red) events of a participant in FIFO order.

        Args:
            participant_id: Owner
            created_before: Only events created strictly before this moment

        Returns:
            List of pending events, oldest first
        """
        stmt = select(PairEvent).where(
            PairEvent.participant_id == participant_id,
            PairEvent.matched.is_(False),
        )
        if created_before is not None:
            stmt = stmt.where(PairEvent.created_at < created_before)

        result = await self.session.execute(stmt.order_by(*FIFO_ORDER))
        return list(result.scalars().all())

    async def get_all(self, participant_id: str) -> list[PairEvent]:
        """Get every event of a participant in FIFO order."""
        return await self.find_by(
            order_by=FIFO_ORDER, participant_id=participant_id
        )

    async def mark_matched(
        self,
        left_event_id: int,
        right_event_id: int,
        matched_at: datetime,
        window_start: datetime,
    ) -> int:
        """
        Turn a left/right pair green (compare-and-swap on matched = false).

        Args:
            left_event_id: Left-leg event
            right_event_id: Right-leg event
            matched_at: Commit time
            window_start: Start of the evaluated window

        Returns:
            Number of rows switched; anything but 2 means a concurrent writer
            already consumed one of the events
        """
        updated = 0
        for event_id, partner_id in (
            (left_event_id, right_event_id),
            (right_event_id, left_event_id),
        ):
            stmt = (
                update(PairEvent)
                .where(PairEvent.id == event_id, PairEvent.matched.is_(False))
                .values(
                    matched=True,
                    matched_at=matched_at,
                    matched_window_start=window_start,
                    partner_event_id=partner_id,
                )
            )
            result = await self.session.execute(stmt)
            updated += result.rowcount
        return updated

    async def count_matched_in_window(
        self,
        participant_id: str,
        tier: PackageTier,
        window_start: datetime,
    ) -> int:
        """
        Count pairs already formed for a tier by one window's evaluation.

        Args:
            participant_id: Owner
            tier: Package tier
            window_start: Start of the window

        Returns:
            Number of pairs (two events each)
        """
        events = await self.count(
            participant_id=participant_id,
            tier=tier,
            matched=True,
            matched_window_start=window_start,
        )
        return events // 2

    async def count_by_tier(
        self, participant_id: str
    ) -> dict[tuple[PackageTier, bool], int]:
        """
        Count events grouped by tier and matched flag in a single query.

        Args:
            participant_id: Owner

        Returns:
            Dict mapping (tier, matched) to event count
        """
        stmt = (
            select(
                PairEvent.tier,
                PairEvent.matched,
                func.count(PairEvent.id).label("count"),
            )
            .where(PairEvent.participant_id == participant_id)
            .group_by(PairEvent.tier, PairEvent.matched)
        )
        result = await self.session.execute(stmt)
        return {(row.tier, bool(row.matched)): row.count for row in result.all()}

    async def get_oldest_pending_created_at(
        self, participant_id: str
    ) -> datetime | None:
        """Get the timestamp of the oldest pending event, if any."""
        stmt = select(func.min(PairEvent.created_at)).where(
            PairEvent.participant_id == participant_id,
            PairEvent.matched.is_(False),
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_participants_with_pending(self) -> list[str]:
        """List owners that still have pending events."""
        stmt = (
            select(PairEvent.participant_id)
            .where(PairEvent.matched.is_(False))
            .distinct()
            .order_by(PairEvent.participant_id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_pairs_matched_since(
        self,
        since: datetime,
        participant_id: str | None = None,
    ) -> int:
        """
        Count pairs matched by windows starting at or after ``since``.

        Args:
            since: Lower bound on the matching window start
            participant_id: Restrict to one owner

        Returns:
            Number of pairs
        """
        stmt = select(func.count(PairEvent.id)).where(
            PairEvent.matched.is_(True),
            PairEvent.matched_window_start >= since,
        )
        if participant_id is not None:
            stmt = stmt.where(PairEvent.participant_id == participant_id)

        result = await self.session.execute(stmt)
        return (result.scalar() or 0) // 2
