"""
Ledger entry repository.

Data access layer for the append-only PV ledger.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import LedgerEntryStatus, LedgerSource
from app.models.ledger_entry import LedgerEntry
from app.repositories.base import BaseRepository


class LedgerEntryRepository(BaseRepository[LedgerEntry]):
    """Ledger entry repository. Exposes no update or delete path."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize ledger entry repository."""
        super().__init__(LedgerEntry, session)

    async def append(
        self,
        participant_id: str,
        amount: Decimal,
        source: LedgerSource,
        remark: str,
    ) -> LedgerEntry:
        """
        Append a new active entry.

        Args:
            participant_id: Participant credited or debited
            amount: Signed amount
            source: Origin tag
            remark: Free text

        Returns:
            Created entry
        """
        return await self.create(
            participant_id=participant_id,
            amount=amount,
            source=source,
            status=LedgerEntryStatus.ACTIVE,
            remark=remark,
        )

    async def get_history(
        self, participant_id: str, limit: int | None = None
    ) -> list[LedgerEntry]:
        """
        Get entries of a participant, newest first.

        Equal timestamps are ordered by sequence, latest first.

        Args:
            participant_id: Participant identity
            limit: Max number of entries

        Returns:
            List of entries
        """
        return await self.find_by(
            order_by=(LedgerEntry.created_at.desc(), LedgerEntry.id.desc()),
            limit=limit,
            participant_id=participant_id,
        )

    async def get_total(self, participant_id: str) -> Decimal:
        """
        Sum non-void amounts of a participant in a single query.

        Args:
            participant_id: Participant identity

        Returns:
            Total PV (0 when the participant has no entries)
        """
        stmt = select(
            func.coalesce(func.sum(LedgerEntry.amount), Decimal("0"))
        ).where(
            LedgerEntry.participant_id == participant_id,
            LedgerEntry.status != LedgerEntryStatus.VOID,
        )
        result = await self.session.execute(stmt)
        return Decimal(result.scalar_one())

    async def get_totals_by_source(
        self, participant_id: str
    ) -> dict[LedgerSource, Decimal]:
        """
        Sum non-void amounts grouped by source.

        Args:
            participant_id: Participant identity

        Returns:
            Dict mapping source to subtotal (sources without entries omitted)
        """
        stmt = (
            select(
                LedgerEntry.source,
                func.sum(LedgerEntry.amount).label("subtotal"),
            )
            .where(
                LedgerEntry.participant_id == participant_id,
                LedgerEntry.status != LedgerEntryStatus.VOID,
            )
            .group_by(LedgerEntry.source)
        )
        result = await self.session.execute(stmt)
        return {row.source: Decimal(row.subtotal) for row in result.all()}
