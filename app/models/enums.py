"""
Enum definitions for database models.

Closed sets of tags used by the tree, ledger and pairing models.
"""

from enum import StrEnum


class TreePosition(StrEnum):
    """Slot a node occupies under its parent."""

    LEFT = "left"
    RIGHT = "right"


class PairSide(StrEnum):
    """Leg a pair event was recorded on."""

    LEFT = "left"
    RIGHT = "right"


class LedgerSource(StrEnum):
    """Origin of a PV ledger entry."""

    ADMIN_CREDIT = "admin_credit"
    ADMIN_DEBIT = "admin_debit"
    SYSTEM = "system"


class LedgerEntryStatus(StrEnum):
    """Ledger entry status. Void entries never count toward totals."""

    ACTIVE = "active"
    VOID = "void"


class PackageTier(StrEnum):
    """Package tier a leg event belongs to; pairs only form within a tier."""

    SILVER = "silver"
    GOLD = "gold"
    RUBY = "ruby"
