"""
PV ledger service.

Append-only point-value ledger: credits, debits, history and totals.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import LedgerSource
from app.models.ledger_entry import LedgerEntry
from app.repositories.ledger_entry_repository import LedgerEntryRepository
from app.services.base_service import BaseService, transaction
from app.utils.exceptions import InvalidAmountError, InvalidInputError
from app.validators import (
    validate_participant_id,
    validate_pv_amount,
    validate_remark,
    validate_source,
)


@dataclass(frozen=True)
class PVSummary:
    """Total PV of a participant together with its history."""

    participant_id: str
    total: Decimal
    entries: list[LedgerEntry] = field(default_factory=list)


class PVLedgerService(BaseService):
    """
    PV ledger service.

    Entries are never updated or deleted; the total is always the sum of
    non-void amounts.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize PV ledger service."""
        super().__init__(session)
        self.ledger_repo = LedgerEntryRepository(session)

    def _participant(self, value: object) -> str:
        is_valid, participant_id, error = validate_participant_id(value)
        if not is_valid:
            raise InvalidInputError(error)
        return participant_id

    def _remark(self, value: object) -> str:
        is_valid, remark, error = validate_remark(value)
        if not is_valid:
            raise InvalidInputError(error)
        return remark

    @transaction
    async def append(
        self,
        participant_id: str,
        amount: Decimal | int | str,
        source: LedgerSource = LedgerSource.SYSTEM,
        remark: str | None = None,
    ) -> LedgerEntry:
        """
        Append a signed entry to the ledger.

        Args:
            participant_id: Participant credited or debited
            amount: Signed amount
            source: Origin tag
            remark: Free text

        Returns:
            Created entry

        Raises:
            InvalidInputError: If the participant key is empty or the source unknown
            InvalidAmountError: If the amount is malformed
        """
        participant_id = self._participant(participant_id)
        is_valid, value, error = validate_pv_amount(amount)
        if not is_valid:
            raise InvalidAmountError(error, amount=str(amount))
        is_valid, source, error = validate_source(source)
        if not is_valid:
            raise InvalidInputError(error)

        entry = await self.ledger_repo.append(
            participant_id=participant_id,
            amount=value,
            source=source,
            remark=self._remark(remark),
        )

        self.logger.info(
            "PV entry appended",
            extra={
                "participant_id": participant_id,
                "entry_id": entry.id,
                "amount": str(value),
                "source": entry.source.value,
            },
        )
        return entry

    async def credit_pv(
        self,
        participant_id: str,
        amount: Decimal | int | str,
        source: LedgerSource = LedgerSource.ADMIN_CREDIT,
        remark: str | None = None,
    ) -> LedgerEntry:
        """
        Credit PV to a participant.

        Raises:
            InvalidAmountError: If amount is not strictly positive
        """
        is_valid, value, error = validate_pv_amount(
            amount, allow_negative=False, allow_zero=False
        )
        if not is_valid:
            raise InvalidAmountError(error, amount=str(amount))
        return await self.append(participant_id, value, source, remark)

    async def debit_pv(
        self,
        participant_id: str,
        amount: Decimal | int | str,
        remark: str | None = None,
    ) -> LedgerEntry:
        """
        Debit PV from a participant.

        The magnitude of ``amount`` is stored as a negative entry, so both
        ``10`` and ``-10`` debit ten points.

        Raises:
            InvalidAmountError: If amount is zero or malformed
        """
        is_valid, value, error = validate_pv_amount(amount, allow_zero=False)
        if not is_valid:
            raise InvalidAmountError(error, amount=str(amount))
        return await self.append(
            participant_id, -abs(value), LedgerSource.ADMIN_DEBIT, remark
        )

    async def history(
        self, participant_id: str, limit: int | None = None
    ) -> list[LedgerEntry]:
        """Get ledger entries of a participant, newest first."""
        participant_id = self._participant(participant_id)
        return await self.ledger_repo.get_history(participant_id, limit=limit)

    async def total(self, participant_id: str) -> Decimal:
        """Get total PV of a participant (void entries excluded)."""
        participant_id = self._participant(participant_id)
        return await self.ledger_repo.get_total(participant_id)

    async def get_total_and_history(self, participant_id: str) -> PVSummary:
        """
        Get total PV and full history in one call.

        Args:
            participant_id: Participant identity

        Returns:
            PVSummary with total and entries newest first
        """
        participant_id = self._participant(participant_id)
        total = await self.ledger_repo.get_total(participant_id)
        entries = await self.ledger_repo.get_history(participant_id)
        return PVSummary(participant_id=participant_id, total=total, entries=entries)

    async def totals_by_source(self, participant_id: str) -> dict[LedgerSource, Decimal]:
        """Get non-void subtotals per source."""
        participant_id = self._participant(participant_id)
        return await self.ledger_repo.get_totals_by_source(participant_id)
