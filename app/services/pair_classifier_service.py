"""
Pair classifier service.

Classifies leg events of each participant as matched (green) or pending
(red) at the close of every session window.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import PackageTier, PairSide
from app.models.pair_event import PairEvent
from app.services.base_service import BaseService, log_operation, transaction
from app.services.pairing import (
    ClassificationResult,
    PairClassificationManager,
    PairEventRecorder,
    PairingStatisticsManager,
    SessionStatus,
    TierSummary,
)
from app.services.pairing.config import PAIRING_LOCK_WAIT_SECONDS, pairing_lock_key
from app.utils.distributed_lock import DistributedLock
from app.utils.exceptions import InvalidInputError, WindowNotClosedError
from app.validators import validate_participant_id
from session_clock import SessionClock, SessionWindow


class PairClassifierService(BaseService):
    """
    Pair classifier service.

    Classification of one participant is serialized by a lock keyed on the
    participant and runs in a single transaction: either every pair of a
    run turns green or none does.
    """

    def __init__(
        self,
        session: AsyncSession,
        clock: SessionClock | None = None,
        lock: DistributedLock | None = None,
        capping_per_window: int | None = None,
        lock_timeout: int | None = None,
    ) -> None:
        """
        Initialize pair classifier service.

        Args:
            session: Database session
            clock: Session clock (defaults to the configured schedule)
            lock: Per-participant lock (defaults to in-process locking)
            capping_per_window: Max pairs per tier per window
            lock_timeout: Lock expiry in seconds
        """
        super().__init__(session)
        from app.config.settings import settings

        self.clock = clock or SessionClock(settings.get_session_schedule())
        self.lock = lock or DistributedLock()
        if capping_per_window is None:
            capping_per_window = settings.pair_capping_per_window
        self.lock_timeout = lock_timeout or settings.pairing_lock_timeout

        self.recorder = PairEventRecorder(session)
        self.classifier = PairClassificationManager(
            session, self.clock, capping_per_window
        )
        self.statistics = PairingStatisticsManager(session, self.clock)

    def _participant(self, value: object) -> str:
        is_valid, participant_id, error = validate_participant_id(value)
        if not is_valid:
            raise InvalidInputError(error)
        return participant_id

    @staticmethod
    def _require_aware(moment: datetime, name: str) -> None:
        if not isinstance(moment, datetime) or moment.utcoffset() is None:
            raise InvalidInputError(f"{name} must be a timezone-aware datetime")

    @transaction
    async def record_leg_event(
        self,
        participant_id: str,
        side: PairSide | str,
        tier: PackageTier | str,
        created_at: datetime | None = None,
        source_participant_id: str | None = None,
        pv: Decimal | int | str | None = None,
    ) -> PairEvent:
        """Record a leg event (see PairEventRecorder.record_leg_event)."""
        return await self.recorder.record_leg_event(
            participant_id,
            side,
            tier,
            created_at=created_at,
            source_participant_id=source_participant_id,
            pv=pv,
        )

    @transaction
    async def record_downline_purchase(
        self,
        buyer_id: str,
        tier: PackageTier | str,
        created_at: datetime | None = None,
    ) -> list[PairEvent]:
        """Propagate a purchase to the buyer's upline as leg events."""
        return await self.recorder.record_downline_purchase(
            buyer_id, tier, created_at=created_at
        )

    async def classify(
        self,
        participant_id: str,
        as_of: datetime,
        window: SessionWindow | None = None,
    ) -> ClassificationResult:
        """
        Classify a participant's pending events at the close of a window.

        Args:
            participant_id: Owner of the legs
            as_of: Moment the evaluation runs at
            window: Window to evaluate (defaults to the last closed one)

        Returns:
            Classification result

        Raises:
            WindowNotClosedError: If ``as_of`` is before the window end
            ParticipantNotFoundError: If the participant has no tree node
            LockTimeoutError: If the participant is being classified elsewhere
        """
        participant_id = self._participant(participant_id)
        self._require_aware(as_of, "as_of")

        if window is None:
            window = self.clock.last_closed_window(as_of)
        elif not window.is_closed(as_of):
            raise WindowNotClosedError(
                f"Window {window.index} ends at {window.end.isoformat()}",
                window_end=window.end.isoformat(),
            )

        async with self.lock.lock(
            pairing_lock_key(participant_id),
            timeout=self.lock_timeout,
            blocking_timeout=PAIRING_LOCK_WAIT_SECONDS,
        ):
            return await self._classify(participant_id, window)

    @transaction
    async def _classify(
        self, participant_id: str, window: SessionWindow
    ) -> ClassificationResult:
        result = await self.classifier.classify_window(participant_id, window)
        await self.classifier.checkpoint_repo.advance(
            participant_id,
            window_end=window.end,
            windows=1,
            pairs=result.pairs_matched,
        )
        return result

    @log_operation
    async def classify_due_windows(
        self, participant_id: str, now: datetime
    ) -> list[ClassificationResult]:
        """
        Classify every window closed since the participant's checkpoint.

        Args:
            participant_id: Owner of the legs
            now: Current aware moment

        Returns:
            One result per evaluated window, oldest first
        """
        participant_id = self._participant(participant_id)
        self._require_aware(now, "now")

        async with self.lock.lock(
            pairing_lock_key(participant_id),
            timeout=self.lock_timeout,
            blocking_timeout=PAIRING_LOCK_WAIT_SECONDS,
        ):
            return await self._classify_due(participant_id, now)

    @transaction
    async def _classify_due(
        self, participant_id: str, now: datetime
    ) -> list[ClassificationResult]:
        results = await self.classifier.classify_due(participant_id, now)
        if results:
            self.logger.info(
                "Due windows classified",
                extra={
                    "participant_id": participant_id,
                    "windows": len(results),
                    "pairs": sum(r.pairs_matched for r in results),
                },
            )
        return results

    async def pending_queue(self, participant_id: str) -> list[PairEvent]:
        """Get pending events, grouped by tier, oldest first."""
        return await self.statistics.pending_queue(self._participant(participant_id))

    async def summary(self, participant_id: str) -> dict[PackageTier, TierSummary]:
        """Get matched/pending event counts per tier."""
        return await self.statistics.summary(self._participant(participant_id))

    async def session_status(
        self, now: datetime, participant_id: str | None = None
    ) -> SessionStatus:
        """Get current window, next window and pairs matched today."""
        self._require_aware(now, "now")
        if participant_id is not None:
            participant_id = self._participant(participant_id)
        return await self.statistics.session_status(now, participant_id)

    async def participants_with_pending(self) -> list[str]:
        """List participants that still have pending events."""
        return await self.classifier.event_repo.get_participants_with_pending()
