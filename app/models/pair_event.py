"""
PairEvent model.

Leg-side contribution attached to a participant, waiting to be paired
with an event of the same tier on the opposite leg.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import PackageTier, PairSide
from app.models.types import (
    ParticipantIdType,
    PointValueType,
    TimestampType,
    enum_column_type,
)


class PairEvent(Base):
    """
    PairEvent entity.

    Red (pending) events turn green (matched) exactly once, together with
    their partner on the opposite leg:
    - matched never reverts to False
    - matched_window_start records which window's evaluation matched it
    - partner_event_id points at the opposite-leg event consumed with it

    Attributes:
        id: Primary key (FIFO tie-breaker)
        participant_id: Owner whose legs are compared
        side: Leg the event was recorded on
        tier: Package tier
        pv: Point value carried by the event
        source_participant_id: Downline member whose activity produced it
        created_at: Event time
        matched: Green flag
        matched_at: When the pair was committed
        matched_window_start: Start of the window that matched it
        partner_event_id: Opposite-leg event it was paired with
    """

    __tablename__ = "pair_events"
    __table_args__ = (
        CheckConstraint(
            "(matched = false AND partner_event_id IS NULL) OR "
            "(matched = true AND partner_event_id IS NOT NULL)",
            name="check_pair_event_partner_when_matched",
        ),
        Index(
            "idx_pair_events_owner_pending",
            "participant_id",
            "matched",
            "tier",
            "created_at",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    participant_id: Mapped[str] = mapped_column(
        ParticipantIdType, nullable=False, index=True
    )
    side: Mapped[PairSide] = mapped_column(
        enum_column_type(PairSide), nullable=False
    )
    tier: Mapped[PackageTier] = mapped_column(
        enum_column_type(PackageTier), nullable=False
    )
    pv: Mapped[Decimal] = mapped_column(
        PointValueType, nullable=False, default=Decimal("0")
    )
    source_participant_id: Mapped[str | None] = mapped_column(
        ParticipantIdType, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        TimestampType,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Classification
    matched: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    matched_at: Mapped[datetime | None] = mapped_column(
        TimestampType, nullable=True
    )
    matched_window_start: Mapped[datetime | None] = mapped_column(
        TimestampType, nullable=True, index=True
    )
    partner_event_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<PairEvent(id={self.id}, participant_id={self.participant_id!r}, "
            f"side={self.side}, tier={self.tier}, matched={self.matched})>"
        )

    @property
    def color(self) -> str:
        """Red/green label used in reports."""
        return "green" if self.matched else "red"
