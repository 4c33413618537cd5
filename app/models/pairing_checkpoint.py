"""
PairingCheckpoint model.

Explicit record of the last session window evaluated for a participant.
"""

from datetime import UTC, datetime

from sqlalchemy import Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.types import ParticipantIdType, TimestampType


class PairingCheckpoint(Base):
    """
    PairingCheckpoint entity.

    The scheduler evaluates every window that closed after
    ``last_window_end`` and then advances it.

    Attributes:
        participant_id: Owner (primary key)
        last_window_end: End of the last evaluated window
        windows_processed: Number of windows evaluated so far
        pairs_matched: Number of pairs formed so far
        updated_at: Last checkpoint update
    """

    __tablename__ = "pairing_checkpoints"

    participant_id: Mapped[str] = mapped_column(
        ParticipantIdType, primary_key=True
    )
    last_window_end: Mapped[datetime] = mapped_column(
        TimestampType, nullable=False
    )
    windows_processed: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    pairs_matched: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    updated_at: Mapped[datetime] = mapped_column(
        TimestampType,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PairingCheckpoint(participant_id={self.participant_id!r}, "
            f"last_window_end={self.last_window_end})>"
        )
