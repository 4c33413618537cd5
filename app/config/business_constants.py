"""
Business logic constants for the binary network.

Central location for business rules shared by the tree, ledger and
pairing services.
"""

from decimal import Decimal

from app.models.enums import PackageTier


# Point value carried by one leg event of each package tier
PACKAGE_TIER_PV: dict[PackageTier, Decimal] = {
    PackageTier.SILVER: Decimal("35"),
    PackageTier.GOLD: Decimal("155"),
    PackageTier.RUBY: Decimal("1250"),
}

# Order in which tiers are evaluated and reported
PACKAGE_TIER_ORDER: list[PackageTier] = [
    PackageTier.SILVER,
    PackageTier.GOLD,
    PackageTier.RUBY,
]

# Remark stored on ledger entries written without an explicit remark
DEFAULT_LEDGER_REMARK = ""

# Maximum remark length accepted by the ledger
MAX_REMARK_LENGTH = 500



def get_tier_pv(tier: PackageTier) -> Decimal:
    """
    Get point value for a package tier.

    Args:
        tier: Package tier

    Returns:
        PV of one leg event of this tier
    """
    return PACKAGE_TIER_PV[tier]
