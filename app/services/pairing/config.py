"""
Pair classification configuration.

Contains constants shared by the pairing managers.
"""

# Prefix of the per-participant lock key held while classifying
PAIRING_LOCK_PREFIX = "pairing:"

# Max seconds to wait for a busy participant before giving up
PAIRING_LOCK_WAIT_SECONDS = 5.0


def pairing_lock_key(participant_id: str) -> str:
    """Build the lock key serializing classification of one participant."""
    return f"{PAIRING_LOCK_PREFIX}{participant_id}"
