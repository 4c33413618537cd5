"""
TreeNode model.

One node of the binary placement tree, keyed by participant identity.
"""

from datetime import UTC, datetime

from sqlalchemy import CheckConstraint, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base
from app.models.enums import TreePosition
from app.models.types import ParticipantIdType, TimestampType, enum_column_type


class TreeNode(Base):
    """
    TreeNode entity.

    Parent and children are stored as participant identities, not object
    references, so the tree is an index over flat rows:
    - Root has no parent, no position and depth 0
    - Every other node has depth == parent.depth + 1
    - left_id/right_id are filled at most once and never cleared

    Attributes:
        id: Primary key
        participant_id: Participant occupying this node (unique)
        parent_id: Parent participant (None for root)
        left_id: Participant in the left slot
        right_id: Participant in the right slot
        position: Slot this node fills under its parent
        depth: Distance from the root
        created_at: Placement time
    """

    __tablename__ = "tree_nodes"
    __table_args__ = (
        UniqueConstraint("participant_id", name="uq_tree_nodes_participant"),
        UniqueConstraint("left_id", name="uq_tree_nodes_left"),
        UniqueConstraint("right_id", name="uq_tree_nodes_right"),
        CheckConstraint("depth >= 0", name="check_tree_node_depth_non_negative"),
        CheckConstraint(
            "(parent_id IS NULL AND position IS NULL AND depth = 0) OR "
            "(parent_id IS NOT NULL AND position IS NOT NULL AND depth > 0)",
            name="check_tree_node_root_shape",
        ),
        Index("idx_tree_nodes_parent", "parent_id"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    participant_id: Mapped[str] = mapped_column(
        ParticipantIdType, nullable=False
    )
    parent_id: Mapped[str | None] = mapped_column(
        ParticipantIdType, nullable=True
    )

    # Child slots
    left_id: Mapped[str | None] = mapped_column(
        ParticipantIdType, nullable=True
    )
    right_id: Mapped[str | None] = mapped_column(
        ParticipantIdType, nullable=True
    )

    position: Mapped[TreePosition | None] = mapped_column(
        enum_column_type(TreePosition), nullable=True
    )
    depth: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    created_at: Mapped[datetime] = mapped_column(
        TimestampType,
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TreeNode(participant_id={self.participant_id!r}, "
            f"parent_id={self.parent_id!r}, depth={self.depth})>"
        )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def child_in(self, position: TreePosition) -> str | None:
        """Get the participant occupying a slot."""
        return self.left_id if position is TreePosition.LEFT else self.right_id

    @property
    def has_both_legs(self) -> bool:
        return self.left_id is not None and self.right_id is not None
