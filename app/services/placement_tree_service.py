"""
Placement tree service.

Maintains the strict binary placement tree: root creation, admin-initiated
placement into a parent's left/right slot, node lookup, downline and
upline walks.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TreePosition
from app.models.tree_node import TreeNode
from app.repositories.tree_node_repository import TreeNodeRepository
from app.services.base_service import BaseService, transaction
from app.utils.distributed_lock import DistributedLock
from app.utils.exceptions import (
    AlreadyPlacedError,
    InvalidInputError,
    InvalidPositionError,
    NodeNotFoundError,
    ParentNotFoundError,
    RootAlreadyExistsError,
    RootNotFoundError,
    SlotOccupiedError,
)
from app.validators import validate_participant_id, validate_position


# Lock key guarding root creation
ROOT_LOCK_KEY = "tree:root"


@dataclass(frozen=True)
class DownlineEntry:
    """Participant found below a root, with its distance from that root."""

    participant_id: str
    depth: int


@dataclass(frozen=True)
class UplineEntry:
    """Ancestor of a participant and the leg the participant hangs on."""

    participant_id: str
    side: TreePosition
    distance: int


@dataclass(frozen=True)
class LegCounts:
    """Number of participants in each leg of a node."""

    left: int
    right: int


def _require_participant_id(value: object) -> str:
    is_valid, participant_id, error = validate_participant_id(value)
    if not is_valid:
        raise InvalidInputError(error)
    return participant_id


class PlacementTreeService(BaseService):
    """
    Service for the binary placement tree.

    Slot fills are monotonic: once a parent's slot holds a participant it is
    never cleared or reassigned, and a participant occupies at most one
    node, ever.
    """

    def __init__(
        self,
        session: AsyncSession,
        default_depth: int | None = None,
        lock: DistributedLock | None = None,
    ) -> None:
        """
        Initialize placement tree service.

        Args:
            session: Database session
            default_depth: Depth used by downline queries that name none
            lock: Lock used to serialize root creation
        """
        super().__init__(session)
        if default_depth is None:
            from app.config.settings import settings

            default_depth = settings.downline_default_depth
        self.default_depth = default_depth
        self.node_repo = TreeNodeRepository(session)
        self.lock = lock or DistributedLock()

    async def lookup(self, participant_id: str) -> TreeNode:
        """
        Get the node occupied by a participant.

        Args:
            participant_id: Participant identity

        Returns:
            Tree node

        Raises:
            NodeNotFoundError: If the participant is not placed
        """
        participant_id = _require_participant_id(participant_id)
        node = await self.node_repo.get_by_participant(participant_id)
        if node is None:
            raise NodeNotFoundError(
                f"Participant {participant_id} has no tree node",
                participant_id=participant_id,
            )
        return node

    async def create_root(self, participant_id: str) -> TreeNode:
        """
        Create the root node of the tree.

        Args:
            participant_id: Participant to place at the root

        Returns:
            Root node

        Raises:
            AlreadyPlacedError: If the participant already occupies a node
            RootAlreadyExistsError: If the tree already has a root
        """
        participant_id = _require_participant_id(participant_id)
        async with self.lock.lock(ROOT_LOCK_KEY):
            return await self._create_root(participant_id)

    @transaction
    async def _create_root(self, participant_id: str) -> TreeNode:
        if await self.node_repo.get_by_participant(participant_id):
            raise AlreadyPlacedError(
                f"Participant {participant_id} is already placed",
                participant_id=participant_id,
            )

        root = await self.node_repo.get_root()
        if root is not None:
            raise RootAlreadyExistsError(
                f"Tree already has root {root.participant_id}",
                root_id=root.participant_id,
            )

        try:
            node = await self.node_repo.create(
                participant_id=participant_id,
                parent_id=None,
                position=None,
                depth=0,
            )
        except IntegrityError as e:
            raise AlreadyPlacedError(
                f"Participant {participant_id} is already placed",
                participant_id=participant_id,
            ) from e

        self.logger.info(
            "Tree root created", extra={"participant_id": participant_id}
        )
        return node

    @transaction
    async def place(
        self,
        parent_id: str,
        child_id: str,
        position: TreePosition | str,
    ) -> TreeNode:
        """
        Place a participant into an empty slot of a parent node.

        The slot is filled with a compare-and-swap in the same transaction
        as the child insert, so two concurrent placements into one slot
        yield exactly one winner and one SlotOccupiedError.

        Args:
            parent_id: Parent participant
            child_id: Participant to place
            position: "left" or "right"

        Returns:
            Newly created child node

        Raises:
            InvalidPositionError: If position is not left/right
            ParentNotFoundError: If the parent has no node
            SlotOccupiedError: If the slot is already filled
            AlreadyPlacedError: If the child already occupies a node
        """
        parent_id = _require_participant_id(parent_id)
        child_id = _require_participant_id(child_id)

        is_valid, slot, error = validate_position(position)
        if not is_valid:
            raise InvalidPositionError(error, position=str(position))

        parent = await self.node_repo.get_by_participant(parent_id)
        if parent is None:
            raise ParentNotFoundError(
                f"Parent {parent_id} has no tree node", parent_id=parent_id
            )

        if parent.child_in(slot) is not None:
            raise SlotOccupiedError(
                f"{slot.value} slot of {parent_id} is already filled",
                parent_id=parent_id,
                position=slot.value,
            )

        if await self.node_repo.get_by_participant(child_id):
            raise AlreadyPlacedError(
                f"Participant {child_id} is already placed",
                participant_id=child_id,
            )

        if not await self.node_repo.fill_slot(parent_id, slot, child_id):
            # Lost the race for this slot
            raise SlotOccupiedError(
                f"{slot.value} slot of {parent_id} is already filled",
                parent_id=parent_id,
                position=slot.value,
            )

        try:
            node = await self.node_repo.create(
                participant_id=child_id,
                parent_id=parent_id,
                position=slot,
                depth=parent.depth + 1,
            )
        except IntegrityError as e:
            raise AlreadyPlacedError(
                f"Participant {child_id} is already placed",
                participant_id=child_id,
            ) from e

        self.logger.info(
            "Participant placed",
            extra={
                "parent_id": parent_id,
                "child_id": child_id,
                "position": slot.value,
                "depth": node.depth,
            },
        )
        return node

    async def _walk_levels(
        self, start: list[TreeNode], max_depth: int | None
    ) -> AsyncIterator[tuple[int, list[TreeNode]]]:
        """Yield (depth, nodes) for each level below ``start``, one query per level."""
        frontier = start
        depth = 0
        while frontier and (max_depth is None or depth < max_depth):
            depth += 1
            child_ids = [
                child_id
                for node in frontier
                for child_id in (node.left_id, node.right_id)
                if child_id is not None
            ]
            nodes = await self.node_repo.get_many(child_ids)
            frontier = [nodes[child_id] for child_id in child_ids if child_id in nodes]
            if frontier:
                yield depth, frontier

    async def downline(
        self, root_id: str, max_depth: int | None = None
    ) -> list[DownlineEntry]:
        """
        List participants below a root, breadth-first.

        Traversal is level by level with a FIFO discipline: left before
        right, and siblings follow the order of their parents on the level
        above. One query is issued per level.

        Args:
            root_id: Participant to start from (excluded from the result)
            max_depth: Deepest level to include (0 returns nothing,
                defaults to the configured depth)

        Returns:
            Entries for depths 1..max_depth

        Raises:
            InvalidInputError: If max_depth is negative
            RootNotFoundError: If the root participant has no node
        """
        if max_depth is None:
            max_depth = self.default_depth
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise InvalidInputError("Depth must be a non-negative integer")

        root_id = _require_participant_id(root_id)
        root = await self.node_repo.get_by_participant(root_id)
        if root is None:
            raise RootNotFoundError(
                f"Root {root_id} has no tree node", participant_id=root_id
            )

        entries: list[DownlineEntry] = []
        async for depth, level in self._walk_levels([root], max_depth):
            entries.extend(
                DownlineEntry(participant_id=node.participant_id, depth=depth)
                for node in level
            )
        return entries

    async def upline(self, participant_id: str) -> list[UplineEntry]:
        """
        List ancestors of a participant, nearest first.

        Each entry names the leg of that ancestor the participant sits in.

        Args:
            participant_id: Participant identity

        Returns:
            Ancestors up to the root

        Raises:
            NodeNotFoundError: If the participant or one of its ancestors
                has no node
        """
        node = await self.lookup(participant_id)
        entries: list[UplineEntry] = []
        side = node.position
        distance = 0
        while node.parent_id is not None:
            parent = await self.node_repo.get_by_participant(node.parent_id)
            if parent is None:
                raise NodeNotFoundError(
                    f"Parent {node.parent_id} of {node.participant_id} has no tree node",
                    participant_id=node.parent_id,
                )
            distance += 1
            entries.append(
                UplineEntry(participant_id=parent.participant_id, side=side, distance=distance)
            )
            # Further ancestors see the whole branch under the leg of this parent
            side = parent.position
            node = parent
        return entries

    async def leg_counts(self, participant_id: str) -> LegCounts:
        """
        Count participants in the left and right legs of a node.

        Args:
            participant_id: Participant identity

        Returns:
            Sizes of the whole legs
        """
        node = await self.lookup(participant_id)

        async def leg_size(child_id: str | None) -> int:
            if child_id is None:
                return 0
            child = await self.lookup(child_id)
            size = 1
            async for _, level in self._walk_levels([child], None):
                size += len(level)
            return size

        return LegCounts(
            left=await leg_size(node.left_id),
            right=await leg_size(node.right_id),
        )
