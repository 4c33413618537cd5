"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.base import Base
from app.models.enums import (
    LedgerEntryStatus,
    LedgerSource,
    PackageTier,
    PairSide,
    TreePosition,
)

# Ledger
from app.models.ledger_entry import LedgerEntry

# Pairing
from app.models.pair_event import PairEvent
from app.models.pairing_checkpoint import PairingCheckpoint

# Placement tree
from app.models.tree_node import TreeNode

__all__ = [
    # Base
    "Base",
    # Enums
    "LedgerEntryStatus",
    "LedgerSource",
    "PackageTier",
    "PairSide",
    "TreePosition",
    # Models
    "TreeNode",
    "LedgerEntry",
    "PairEvent",
    "PairingCheckpoint",
]
