import hashlib
from decimal import Decimal

import config
from models.price_tier import PriceTierDTO

# Fingerprint of lines whose subcategory has no tier table for the audience.
# Such lines are never pooled and stay at unit price 0.
NO_PRICING = "no-pricing"


def _canonical_price(price: Decimal) -> str:
    # 90, 90.0 and 90.00 must fingerprint identically
    return format(Decimal(price).normalize(), "f")


class PricingService:
    """Tiered quantity pricing shared by the cart, offline billing and the product listing."""

    @staticmethod
    def price_for_quantity(tiers: list[PriceTierDTO] | None, quantity: int) -> Decimal:
        """
        Look up the unit price for a cumulative quantity.

        Algorithm:
        1. Sort a copy of the tiers by min_quantity ascending
        2. Start from the lowest tier's price
        3. Every tier containing the quantity (min <= qty <= max, max None = unbounded)
           overwrites the price, so the last match in ascending order wins

        With overlapping tiers [0-20 → ₹100, 10+ → ₹90], quantity 15 gets ₹90.
        A quantity outside every tier keeps the lowest tier's price.

        No rounding happens here; amounts are rounded for display only.

        Args:
            tiers: Tier list of one audience, in any order
            quantity: Cumulative quantity of the pricing group

        Returns:
            Unit price, or 0 when no tiers are configured
        """
        if not tiers:
            return Decimal(0)

        sorted_tiers = sorted(tiers, key=lambda t: t.min_quantity)

        unit_price = sorted_tiers[0].unit_price
        for tier in sorted_tiers:
            if tier.min_quantity <= quantity and (tier.max_quantity is None or quantity <= tier.max_quantity):
                unit_price = tier.unit_price

        return unit_price

    @staticmethod
    def pricing_fingerprint(tiers: list[PriceTierDTO] | None) -> str:
        """
        Stable, order-independent key of a tier list.

        Lines whose tier lists are equal as sets share a fingerprint and pool their
        quantities, even when they belong to different subcategories. Any change of a
        boundary or a price yields a different fingerprint.

        Returns:
            SHA-256 hex digest of the canonical tier list, or NO_PRICING for empty/absent tiers
        """
        if not tiers:
            return NO_PRICING

        canonical_tiers = sorted(
            tiers,
            key=lambda t: (
                t.min_quantity,
                t.max_quantity is None,
                t.max_quantity or 0,
                Decimal(t.unit_price)
            )
        )
        canonical = ";".join(
            f"{t.min_quantity}|{'inf' if t.max_quantity is None else t.max_quantity}|{_canonical_price(t.unit_price)}"
            for t in canonical_tiers
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @staticmethod
    def format_price(amount: Decimal | None) -> str:
        """Display an amount rounded to currency precision; None renders as N/A."""
        if amount is None:
            return "N/A"
        return f"{config.CURRENCY_SYMBOL}{Decimal(amount):.2f}"
