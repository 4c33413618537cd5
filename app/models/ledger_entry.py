"""
LedgerEntry model.

Append-only record of signed point-value events per participant.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import LedgerEntryStatus, LedgerSource
from app.models.types import (
    ParticipantIdType,
    PointValueType,
    TimestampType,
    enum_column_type,
)


class LedgerEntry(Base):
    """
    LedgerEntry entity.

    Entries are only ever inserted. A debit is stored as a negative amount;
    the running total of a participant is the sum of all non-void amounts.

    Attributes:
        id: Monotonic sequence (tie-breaker for equal timestamps)
        participant_id: Participant credited or debited
        amount: Signed point value
        source: Origin tag
        status: active or void
        remark: Free text
        created_at: When the entry was appended
    """

    __tablename__ = "pv_ledger_entries"
    __table_args__ = (
        Index("idx_pv_ledger_participant_created", "participant_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    participant_id: Mapped[str] = mapped_column(
        ParticipantIdType, nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(
        PointValueType,
        nullable=False,
        comment="Signed PV amount (debits are negative)",
    )
    source: Mapped[LedgerSource] = mapped_column(
        enum_column_type(LedgerSource), nullable=False
    )
    status: Mapped[LedgerEntryStatus] = mapped_column(
        enum_column_type(LedgerEntryStatus),
        nullable=False,
        default=LedgerEntryStatus.ACTIVE,
    )
    remark: Mapped[str] = mapped_column(
        Text, nullable=False, default=""
    )

    created_at: Mapped[datetime] = mapped_column(
        TimestampType,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<LedgerEntry(id={self.id}, participant_id={self.participant_id!r}, "
            f"amount={self.amount}, source={self.source}, status={self.status})>"
        )

    @property
    def is_void(self) -> bool:
        return self.status is LedgerEntryStatus.VOID
