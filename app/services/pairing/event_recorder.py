"""
Leg event recording module.

Handles the external input of the pair classifier: leg events attached to
a participant, either directly or propagated from a downline purchase.
"""

from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import get_tier_pv
from app.models.enums import PackageTier, PairSide
from app.models.pair_event import PairEvent
from app.repositories.pair_event_repository import PairEventRepository
from app.repositories.tree_node_repository import TreeNodeRepository
from app.services.placement_tree_service import PlacementTreeService
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import InvalidInputError, ParticipantNotFoundError
from app.validators import (
    validate_participant_id,
    validate_pv_amount,
    validate_side,
    validate_tier,
)


def _aware(value: datetime | None) -> datetime:
    if value is None:
        return utc_now()
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidInputError("Event time must be timezone-aware")
    return value


class PairEventRecorder:
    """Records leg events for participants of the placement tree."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize event recorder."""
        self.session = session
        self.event_repo = PairEventRepository(session)
        self.node_repo = TreeNodeRepository(session)
        self.tree = PlacementTreeService(session)

    async def record_leg_event(
        self,
        participant_id: str,
        side: PairSide | str,
        tier: PackageTier | str,
        created_at: datetime | None = None,
        source_participant_id: str | None = None,
        pv: Decimal | int | str | None = None,
    ) -> PairEvent:
        """
        Attach a leg event to a placed participant.

        Args:
            participant_id: Owner of the legs
            side: Leg the event belongs to
            tier: Package tier
            created_at: Event time (defaults to now)
            source_participant_id: Downline member behind the event
            pv: Point value (defaults to the tier's PV)

        Returns:
            New pending event

        Raises:
            InvalidInputError: On malformed arguments
            ParticipantNotFoundError: If the owner has no tree node
        """
        is_valid, owner, error = validate_participant_id(participant_id)
        if not is_valid:
            raise InvalidInputError(error)

        is_valid, leg, error = validate_side(side)
        if not is_valid:
            raise InvalidInputError(error, side=str(side))

        is_valid, package, error = validate_tier(tier)
        if not is_valid:
            raise InvalidInputError(error, tier=str(tier))

        if pv is None:
            value = get_tier_pv(package)
        else:
            is_valid, value, error = validate_pv_amount(pv, allow_negative=False)
            if not is_valid:
                raise InvalidInputError(error, pv=str(pv))

        if await self.node_repo.get_by_participant(owner) is None:
            raise ParticipantNotFoundError(
                f"Participant {owner} has no tree node", participant_id=owner
            )

        event = await self.event_repo.create(
            participant_id=owner,
            side=leg,
            tier=package,
            pv=value,
            source_participant_id=source_participant_id,
            created_at=_aware(created_at),
            matched=False,
        )

        logger.debug(
            "Leg event recorded",
            extra={
                "participant_id": owner,
                "event_id": event.id,
                "side": leg.value,
                "tier": package.value,
            },
        )
        return event

    async def record_downline_purchase(
        self,
        buyer_id: str,
        tier: PackageTier | str,
        created_at: datetime | None = None,
    ) -> list[PairEvent]:
        """
        Propagate a package purchase to every ancestor of the buyer.

        Each ancestor receives one event on the leg the buyer hangs under.

        Args:
            buyer_id: Participant who bought the package
            tier: Package tier bought
            created_at: Purchase time (defaults to now)

        Returns:
            Created events, nearest ancestor first

        Raises:
            NodeNotFoundError: If the buyer is not placed
        """
        moment = _aware(created_at)
        upline = await self.tree.upline(buyer_id)

        events = [
            await self.record_leg_event(
                participant_id=ancestor.participant_id,
                side=PairSide(ancestor.side.value),
                tier=tier,
                created_at=moment,
                source_participant_id=buyer_id,
            )
            for ancestor in upline
        ]

        logger.info(
            "Downline purchase propagated",
            extra={"buyer_id": buyer_id, "ancestors": len(events)},
        )
        return events
