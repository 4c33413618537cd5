"""
Pairing services package.

Contains modular services for red/green leg classification:
- config: Lock key configuration
- matcher: Pure FIFO matching per package tier
- event_recorder: Records leg events and propagates downline purchases
- classification_manager: Evaluates closed session windows
- statistics: Pending queue, tier summaries and session status
"""

from app.services.pairing.classification_manager import (
    ClassificationResult,
    PairClassificationManager,
)
from app.services.pairing.config import PAIRING_LOCK_PREFIX, pairing_lock_key
from app.services.pairing.event_recorder import PairEventRecorder
from app.services.pairing.matcher import MatchedPair, match_fifo
from app.services.pairing.statistics import (
    PairingStatisticsManager,
    SessionStatus,
    TierSummary,
)


__all__ = [
    # Configuration
    "PAIRING_LOCK_PREFIX",
    "pairing_lock_key",
    # Matching
    "MatchedPair",
    "match_fifo",
    # Managers
    "PairEventRecorder",
    "PairClassificationManager",
    "PairingStatisticsManager",
    # Results
    "ClassificationResult",
    "SessionStatus",
    "TierSummary",
]
