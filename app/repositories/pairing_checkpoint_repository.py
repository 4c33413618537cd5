"""
Pairing checkpoint repository.

Data access layer for the last-evaluated-window bookkeeping.
"""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.pairing_checkpoint import PairingCheckpoint
from app.repositories.base import BaseRepository


class PairingCheckpointRepository(BaseRepository[PairingCheckpoint]):
    """Pairing checkpoint repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize pairing checkpoint repository."""
        super().__init__(PairingCheckpoint, session)

    async def get_for_participant(
        self, participant_id: str
    ) -> PairingCheckpoint | None:
        """Get the checkpoint of a participant."""
        return await self.session.get(PairingCheckpoint, participant_id)

    async def advance(
        self,
        participant_id: str,
        window_end: datetime,
        windows: int,
        pairs: int,
    ) -> PairingCheckpoint:
        """
        Move a checkpoint forward, creating it on first use.

        The checkpoint never moves backwards.

        Args:
            participant_id: Owner
            window_end: End of the last evaluated window
            windows: Windows evaluated in this run
            pairs: Pairs formed in this run

        Returns:
            Updated checkpoint
        """
        checkpoint = await self.get_for_participant(participant_id)
        if checkpoint is None:
            return await self.create(
                participant_id=participant_id,
                last_window_end=window_end,
                windows_processed=windows,
                pairs_matched=pairs,
            )

        if window_end > checkpoint.last_window_end:
            checkpoint.last_window_end = window_end
        checkpoint.windows_processed += windows
        checkpoint.pairs_matched += pairs
        await self.session.flush()
        return checkpoint
