"""
Common validators for network core input.

Each validator returns a tuple of (is_valid, parsed_value, error_message).
"""

from decimal import Decimal, InvalidOperation

from app.config.business_constants import DEFAULT_LEDGER_REMARK, MAX_REMARK_LENGTH
from app.models.enums import LedgerSource, PackageTier, PairSide, TreePosition
from app.models.types import MAX_PARTICIPANT_ID_LENGTH, MAX_POINT_VALUE

# Ledger amounts are stored with 4 decimal places
PV_DECIMAL_PLACES = 4


def validate_participant_id(value: object) -> tuple[bool, str | None, str | None]:
    """
    Validate an opaque participant key.

    Args:
        value: Key to validate

    Returns:
        Tuple of (is_valid, normalized_key, error_message)

    Examples:
        >>> validate_participant_id(" U1 ")
        (True, 'U1', None)
        >>> validate_participant_id("")
        (False, None, 'Participant id cannot be empty')
    """
    if not isinstance(value, str):
        return False, None, "Participant id must be a string"

    value = value.strip()
    if not value:
        return False, None, "Participant id cannot be empty"

    if len(value) > MAX_PARTICIPANT_ID_LENGTH:
        return (
            False,
            None,
            f"Participant id is longer than {MAX_PARTICIPANT_ID_LENGTH} characters",
        )

    return True, value, None


def validate_position(value: object) -> tuple[bool, TreePosition | None, str | None]:
    """
    Validate a tree slot position.

    Examples:
        >>> validate_position("left")
        (True, <TreePosition.LEFT: 'left'>, None)
        >>> validate_position("middle")
        (False, None, "Position must be 'left' or 'right'")
    """
    if isinstance(value, TreePosition):
        return True, value, None
    if isinstance(value, str):
        try:
            return True, TreePosition(value.strip().lower()), None
        except ValueError:
            pass
    return False, None, "Position must be 'left' or 'right'"


def validate_side(value: object) -> tuple[bool, PairSide | None, str | None]:
    """Validate a leg side."""
    if isinstance(value, PairSide):
        return True, value, None
    if isinstance(value, str):
        try:
            return True, PairSide(value.strip().lower()), None
        except ValueError:
            pass
    return False, None, "Side must be 'left' or 'right'"


def validate_tier(value: object) -> tuple[bool, PackageTier | None, str | None]:
    """Validate a package tier."""
    if isinstance(value, PackageTier):
        return True, value, None
    if isinstance(value, str):
        try:
            return True, PackageTier(value.strip().lower()), None
        except ValueError:
            pass
    tiers = ", ".join(t.value for t in PackageTier)
    return False, None, f"Tier must be one of: {tiers}"


def validate_source(value: object) -> tuple[bool, LedgerSource | None, str | None]:
    """
    Validate a ledger source tag.

    Examples:
        >>> validate_source("system")
        (True, <LedgerSource.SYSTEM: 'system'>, None)
        >>> validate_source("bonus")
        (False, None, 'Source must be one of: admin_credit, admin_debit, system')
    """
    if isinstance(value, LedgerSource):
        return True, value, None
    if isinstance(value, str):
        try:
            return True, LedgerSource(value.strip().lower()), None
        except ValueError:
            pass
    sources = ", ".join(s.value for s in LedgerSource)
    return False, None, f"Source must be one of: {sources}"


def validate_pv_amount(
    value: object,
    allow_negative: bool = True,
    allow_zero: bool = True,
) -> tuple[bool, Decimal | None, str | None]:
    """
    Validate a point-value amount.

    Args:
        value: Decimal, int or numeric string
        allow_negative: Accept values below zero
        allow_zero: Accept zero

    Returns:
        Tuple of (is_valid, parsed_value, error_message)

    Examples:
        >>> validate_pv_amount("100.5")
        (True, Decimal('100.5'), None)
        >>> validate_pv_amount(0, allow_zero=False)
        (False, None, 'Amount must be non-zero')
    """
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, str)):
        return False, None, "Amount must be a number"

    try:
        amount = Decimal(value.strip().replace(",", ".")) if isinstance(value, str) else Decimal(value)
    except InvalidOperation:
        return False, None, "Invalid amount format"

    if not amount.is_finite():
        return False, None, "Amount must be a finite number"

    if not allow_zero and amount == 0:
        return False, None, "Amount must be non-zero"

    if not allow_negative and amount < 0:
        return False, None, "Amount must be >= 0"

    if abs(amount) >= MAX_POINT_VALUE:
        return False, None, "Amount is out of range"

    if amount.as_tuple().exponent < -PV_DECIMAL_PLACES:
        return (
            False,
            None,
            f"Amount has too many decimal places (maximum {PV_DECIMAL_PLACES})",
        )

    return True, amount, None


def validate_remark(value: object) -> tuple[bool, str | None, str | None]:
    """Validate a free-text ledger remark."""
    if value is None:
        return True, DEFAULT_LEDGER_REMARK, None
    if not isinstance(value, str):
        return False, None, "Remark must be a string"
    if len(value) > MAX_REMARK_LENGTH:
        return False, None, f"Remark is longer than {MAX_REMARK_LENGTH} characters"
    return True, value.strip(), None
