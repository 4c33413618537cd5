"""
Tree node repository.

Data access layer for the binary placement tree.
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import TreePosition
from app.models.tree_node import TreeNode
from app.repositories.base import BaseRepository


class TreeNodeRepository(BaseRepository[TreeNode]):
    """Tree node repository with slot and traversal queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize tree node repository."""
        super().__init__(TreeNode, session)

    async def get_by_participant(
        self, participant_id: str
    ) -> TreeNode | None:
        """
        Get node occupied by a participant.

        Args:
            participant_id: Participant identity

        Returns:
            Node or None if the participant is not placed
        """
        return await self.get_by(participant_id=participant_id)

    async def get_many(
        self, participant_ids: list[str]
    ) -> dict[str, TreeNode]:
        """
        Get nodes for several participants in a single query.

        Args:
            participant_ids: Participant identities

        Returns:
            Dict mapping participant id to node (missing ids omitted)
        """
        if not participant_ids:
            return {}

        stmt = select(TreeNode).where(
            TreeNode.participant_id.in_(participant_ids)
        )
        result = await self.session.execute(stmt)
        return {node.participant_id: node for node in result.scalars().all()}

    async def get_root(self) -> TreeNode | None:
        """Get the root node, if the tree has one."""
        stmt = select(TreeNode).where(TreeNode.parent_id.is_(None))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def fill_slot(
        self,
        parent_id: str,
        position: TreePosition,
        child_id: str,
    ) -> bool:
        """
        Fill an empty child slot (compare-and-swap).

        The UPDATE only matches while the slot is still NULL, so of two
        concurrent writers exactly one sees a row updated.

        Args:
            parent_id: Parent participant
            position: Slot to fill
            child_id: Participant to put in the slot

        Returns:
            True if this call filled the slot, False if it was already taken
        """
        column = TreeNode.left_id if position is TreePosition.LEFT else TreeNode.right_id
        stmt = (
            update(TreeNode)
            .where(TreeNode.participant_id == parent_id)
            .where(column.is_(None))
            .values({column: child_id})
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
