"""
Pair classification module.

Evaluates one closed session window for one participant: selects the
eligible pending events, pairs them FIFO per tier and turns the pairs
green.
"""

from dataclasses import dataclass, field
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import PACKAGE_TIER_ORDER
from app.repositories.pair_event_repository import PairEventRepository
from app.repositories.pairing_checkpoint_repository import (
    PairingCheckpointRepository,
)
from app.repositories.tree_node_repository import TreeNodeRepository
from app.services.pairing.matcher import MatchedPair, match_fifo
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import ConcurrentUpdateError, ParticipantNotFoundError
from session_clock import SessionClock, SessionWindow


@dataclass
class ClassificationResult:
    """Outcome of evaluating one window for one participant."""

    participant_id: str
    window: SessionWindow
    pairs: list[MatchedPair] = field(default_factory=list)
    pending_after: int = 0

    @property
    def pairs_matched(self) -> int:
        return len(self.pairs)


class PairClassificationManager:
    """Runs window evaluations. Callers own the transaction and the lock."""

    def __init__(
        self,
        session: AsyncSession,
        clock: SessionClock,
        capping_per_window: int | None = None,
    ) -> None:
        """Initialize classification manager."""
        self.session = session
        self.clock = clock
        self.capping_per_window = capping_per_window
        self.event_repo = PairEventRepository(session)
        self.node_repo = TreeNodeRepository(session)
        self.checkpoint_repo = PairingCheckpointRepository(session)

    async def classify_window(
        self, participant_id: str, window: SessionWindow
    ) -> ClassificationResult:
        """
        Evaluate one closed window.

        Events created before the window end are eligible, including
        events left pending by earlier windows. Re-evaluating a window
        finds only what is still pending, so a second run is a no-op
        unless new events arrived.

        Args:
            participant_id: Owner of the legs
            window: Closed window to evaluate

        Returns:
            Classification result

        Raises:
            ParticipantNotFoundError: If the participant has no tree node
            ConcurrentUpdateError: If another writer consumed an event first
        """
        node = await self.node_repo.get_by_participant(participant_id)
        if node is None:
            raise ParticipantNotFoundError(
                f"Participant {participant_id} has no tree node",
                participant_id=participant_id,
            )

        pending = await self.event_repo.get_pending(
            participant_id, created_before=window.end
        )
        result = ClassificationResult(participant_id=participant_id, window=window)

        # Pairs need a filled slot on both legs
        if not node.has_both_legs:
            result.pending_after = len(pending)
            return result

        already_matched = {}
        if self.capping_per_window is not None:
            for tier in PACKAGE_TIER_ORDER:
                already_matched[tier] = await self.event_repo.count_matched_in_window(
                    participant_id, tier, window.start
                )

        pairs = match_fifo(pending, self.capping_per_window, already_matched)

        matched_at = utc_now()
        for pair in pairs:
            updated = await self.event_repo.mark_matched(
                pair.left_event_id,
                pair.right_event_id,
                matched_at=matched_at,
                window_start=window.start,
            )
            if updated != 2:
                raise ConcurrentUpdateError(
                    "Pair event was consumed by a concurrent classification",
                    participant_id=participant_id,
                    left_event_id=pair.left_event_id,
                    right_event_id=pair.right_event_id,
                )

        result.pairs = pairs
        result.pending_after = len(pending) - 2 * len(pairs)

        if pairs:
            logger.info(
                "Window classified",
                extra={
                    "participant_id": participant_id,
                    "window": window.index,
                    "window_start": window.start.isoformat(),
                    "pairs": len(pairs),
                },
            )
        return result

    async def classify_due(
        self, participant_id: str, now: datetime
    ) -> list[ClassificationResult]:
        """
        Evaluate every window closed since the participant's checkpoint.

        Without a checkpoint, evaluation starts at the window holding the
        oldest pending event. The checkpoint is advanced to the end of the
        last evaluated window.

        Args:
            participant_id: Owner of the legs
            now: Current aware moment

        Returns:
            One result per evaluated window, oldest first
        """
        if await self.node_repo.get_by_participant(participant_id) is None:
            raise ParticipantNotFoundError(
                f"Participant {participant_id} has no tree node",
                participant_id=participant_id,
            )

        checkpoint = await self.checkpoint_repo.get_for_participant(participant_id)
        if checkpoint is not None:
            after = checkpoint.last_window_end
        else:
            after = await self.event_repo.get_oldest_pending_created_at(participant_id)
            if after is None:
                return []

        windows = self.clock.closed_windows_between(after, now)
        if not windows:
            return []

        results = [
            await self.classify_window(participant_id, window) for window in windows
        ]

        await self.checkpoint_repo.advance(
            participant_id,
            window_end=windows[-1].end,
            windows=len(windows),
            pairs=sum(r.pairs_matched for r in results),
        )
        return results
