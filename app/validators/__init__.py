"""
Validators package.

Provides common validation functions for network core input.
"""

from app.validators.common import (
    validate_participant_id,
    validate_position,
    validate_pv_amount,
    validate_remark,
    validate_side,
    validate_source,
    validate_tier,
)


__all__ = [
    "validate_participant_id",
    "validate_position",
    "validate_side",
    "validate_tier",
    "validate_source",
    "validate_pv_amount",
    "validate_remark",
]
