"""
Services.

Business logic layer.
"""

# Base Service Infrastructure
from app.services.base_service import (
    BaseService,
    log_operation,
    transaction,
)

# Core Services
from app.services.pair_classifier_service import PairClassifierService
from app.services.placement_tree_service import (
    DownlineEntry,
    LegCounts,
    PlacementTreeService,
    UplineEntry,
)
from app.services.pv_ledger_service import PVLedgerService, PVSummary


__all__ = [
    # Base
    "BaseService",
    "log_operation",
    "transaction",
    # Placement tree
    "PlacementTreeService",
    "DownlineEntry",
    "UplineEntry",
    "LegCounts",
    # PV ledger
    "PVLedgerService",
    "PVSummary",
    # Pairing
    "PairClassifierService",
]
