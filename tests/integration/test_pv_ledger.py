"""Integration tests for the PV ledger service."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import LedgerEntryStatus, LedgerSource
from app.repositories.ledger_entry_repository import LedgerEntryRepository
from app.services.pv_ledger_service import PVLedgerService
from app.utils.exceptions import InvalidAmountError, InvalidInputError


@pytest.fixture
def ledger(db_session: AsyncSession) -> PVLedgerService:
    return PVLedgerService(db_session)


class TestAppend:
    """Tests for appending entries."""

    @pytest.mark.asyncio
    async def test_credit_then_debit_total(self, ledger: PVLedgerService) -> None:
        """+100 credit and -40 debit leave a total of 60."""
        await ledger.append("U1", Decimal("100"), "admin_credit")
        await ledger.append("U1", Decimal("-40"), "admin_debit")

        assert await ledger.total("U1") == Decimal("60")

    @pytest.mark.asyncio
    async def test_total_without_entries_is_zero(self, ledger: PVLedgerService) -> None:
        assert await ledger.total("U1") == Decimal("0")

    @pytest.mark.asyncio
    async def test_entry_fields(self, ledger: PVLedgerService) -> None:
        entry = await ledger.append("U1", "12.5", LedgerSource.SYSTEM, remark=" bonus ")

        assert entry.id is not None
        assert entry.amount == Decimal("12.5")
        assert entry.source is LedgerSource.SYSTEM
        assert entry.status is LedgerEntryStatus.ACTIVE
        assert entry.remark == "bonus"
        assert entry.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_empty_participant_rejected(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidInputError):
            await ledger.append("", Decimal("10"), LedgerSource.SYSTEM)

        assert await ledger.history("U1") == []

    @pytest.mark.asyncio
    async def test_malformed_amount_rejected(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidAmountError):
            await ledger.append("U1", "ten", LedgerSource.SYSTEM)

    @pytest.mark.asyncio
    async def test_unknown_source_rejected(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            await ledger.append("U1", 10, "bogus_source", "x")

        assert exc_info.value.reason == "invalid input"
        assert await ledger.history("U1") == []

    @pytest.mark.asyncio
    async def test_source_tag_from_string(self, ledger: PVLedgerService) -> None:
        entry = await ledger.append("U1", 10, "admin_credit")

        assert entry.source is LedgerSource.ADMIN_CREDIT

    @pytest.mark.asyncio
    async def test_amount_beyond_column_range_rejected(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidAmountError):
            await ledger.append("U1", "1e20", LedgerSource.SYSTEM)
        with pytest.raises(InvalidAmountError):
            await ledger.credit_pv("U1", 10**15)

        assert await ledger.total("U1") == Decimal("0")

    @pytest.mark.asyncio
    async def test_braced_participant_id(self, ledger: PVLedgerService) -> None:
        """Rejections for ids containing format braces keep their category."""
        await ledger.credit_pv("{U1}", 5)

        with pytest.raises(InvalidAmountError):
            await ledger.append("{U1}", "ten", LedgerSource.SYSTEM)

        assert await ledger.total("{U1}") == Decimal("5")


class TestCreditDebit:
    """Tests for credit_pv and debit_pv."""

    @pytest.mark.asyncio
    async def test_credit_requires_positive(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidAmountError):
            await ledger.credit_pv("U1", 0)
        with pytest.raises(InvalidAmountError):
            await ledger.credit_pv("U1", -5)

    @pytest.mark.asyncio
    async def test_debit_stores_negative_magnitude(self, ledger: PVLedgerService) -> None:
        first = await ledger.debit_pv("U1", 10)
        second = await ledger.debit_pv("U1", -15)

        assert first.amount == Decimal("-10")
        assert second.amount == Decimal("-15")
        assert first.source is LedgerSource.ADMIN_DEBIT
        assert await ledger.total("U1") == Decimal("-25")

    @pytest.mark.asyncio
    async def test_debit_zero_rejected(self, ledger: PVLedgerService) -> None:
        with pytest.raises(InvalidAmountError):
            await ledger.debit_pv("U1", 0)

    @pytest.mark.asyncio
    async def test_totals_by_source(self, ledger: PVLedgerService) -> None:
        await ledger.credit_pv("U1", 100)
        await ledger.credit_pv("U1", 5, source=LedgerSource.SYSTEM)
        await ledger.debit_pv("U1", 30)

        assert await ledger.totals_by_source("U1") == {
            LedgerSource.ADMIN_CREDIT: Decimal("100"),
            LedgerSource.SYSTEM: Decimal("5"),
            LedgerSource.ADMIN_DEBIT: Decimal("-30"),
        }


class TestHistory:
    """Tests for history and totals."""

    @pytest.mark.asyncio
    async def test_history_newest_first(
        self, ledger: PVLedgerService, db_session: AsyncSession
    ) -> None:
        repo = LedgerEntryRepository(db_session)
        base = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
        for minutes, amount in ((0, 1), (10, 2), (5, 3)):
            await repo.create(
                participant_id="U1",
                amount=Decimal(amount),
                source=LedgerSource.SYSTEM,
                created_at=base + timedelta(minutes=minutes),
            )
        await db_session.commit()

        history = await ledger.history("U1")

        assert [e.amount for e in history] == [Decimal(2), Decimal(3), Decimal(1)]

    @pytest.mark.asyncio
    async def test_same_timestamp_latest_sequence_first(
        self, ledger: PVLedgerService, db_session: AsyncSession
    ) -> None:
        repo = LedgerEntryRepository(db_session)
        moment = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)
        first = await repo.create(
            participant_id="U1", amount=Decimal(1), source=LedgerSource.SYSTEM, created_at=moment
        )
        second = await repo.create(
            participant_id="U1", amount=Decimal(2), source=LedgerSource.SYSTEM, created_at=moment
        )
        await db_session.commit()

        history = await ledger.history("U1")

        assert [e.id for e in history] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_void_entries_excluded_from_total(
        self, ledger: PVLedgerService, db_session: AsyncSession
    ) -> None:
        await ledger.credit_pv("U1", 100)
        await LedgerEntryRepository(db_session).create(
            participant_id="U1",
            amount=Decimal("500"),
            source=LedgerSource.SYSTEM,
            status=LedgerEntryStatus.VOID,
        )
        await db_session.commit()

        summary = await ledger.get_total_and_history("U1")

        assert summary.total == Decimal("100")
        assert len(summary.entries) == 2
        assert any(e.is_void for e in summary.entries)

    @pytest.mark.asyncio
    async def test_total_equals_sum_of_active_history(self, ledger: PVLedgerService) -> None:
        for amount in ("10", "20.25", "-7.5"):
            await ledger.append("U1", amount, LedgerSource.SYSTEM)
        await ledger.credit_pv("U2", 999)

        summary = await ledger.get_total_and_history("U1")

        assert summary.total == sum(e.amount for e in summary.entries if not e.is_void)
        assert summary.total == Decimal("22.75")
        assert summary.participant_id == "U1"

    @pytest.mark.asyncio
    async def test_history_limit(self, ledger: PVLedgerService) -> None:
        for _ in range(3):
            await ledger.credit_pv("U1", 1)

        assert len(await ledger.history("U1", limit=2)) == 2
