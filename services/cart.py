import logging
import re
from decimal import Decimal
from typing import Any

import config
from enums.pricing_audience import PricingAudience
from models.cart import CartDTO, CartLineDTO, MinOrderCheckDTO
from models.price_tier import TieredPricingDTO
from models.product import ProductDTO
from services.pricing import PricingService, NO_PRICING


class CartService:
    """
    Cart mutations with pooled tier pricing.

    Every mutation runs synchronously to completion and ends with a pooled recompute:
    lines sharing a pricing fingerprint sum their quantities, and each of them gets the
    unit price of that summed quantity. The same cart model backs the storefront cart
    and the admin offline-billing cart.
    """

    @staticmethod
    def cart_line_id(product_id: int, variation: dict[str, Any] | None = None) -> str:
        """
        Deterministic line identity: the product id, plus the variation values.

        Variation values are taken in sorted key order, null values and the stock
        field are skipped, whitespace runs become "-".

        Examples:
            cart_line_id(7) → "7"
            cart_line_id(7, {"size": "2.4", "color": "Rose Gold"}) → "7_Rose-Gold_2.4"
        """
        if not variation:
            return str(product_id)
        values = [
            re.sub(r"\s+", "-", str(variation[key]))
            for key in sorted(variation)
            if key != "quantity" and variation[key] is not None
        ]
        if not values:
            return str(product_id)
        return f"{product_id}_{'_'.join(values)}"

    @staticmethod
    def _stock_ceiling(
        product: ProductDTO,
        variation: dict[str, Any] | None,
        existing_line: CartLineDTO | None
    ) -> int | None:
        if variation is not None:
            # Variation stock always travels with the variation
            quantity = variation.get("quantity")
            return int(quantity) if quantity is not None else None
        if existing_line is not None:
            return existing_line.max_quantity
        return product.quantity

    @staticmethod
    def _tiers_for(tiered_pricing: TieredPricingDTO | None, audience: PricingAudience):
        if tiered_pricing is None:
            return None
        return tiered_pricing.for_audience(audience)

    @staticmethod
    def add_line(
        cart: CartDTO,
        product: ProductDTO,
        tiered_pricing: TieredPricingDTO | None,
        variation: dict[str, Any] | None = None
    ) -> bool:
        """
        Add one unit of a product (or one of its variations) to the cart.

        Adding at or above the stock ceiling is a silent no-op: it is the normal
        outcome of pressing "+" on the last unit in stock.

        Args:
            cart: Cart to mutate
            product: Catalog snapshot of the product
            tiered_pricing: Tier table of the product's subcategory (None if not configured)
            variation: Selected variation, carrying its own "quantity" stock

        Returns:
            True if the cart changed, False if the add was rejected
        """
        if product.id is None or product.subcategory_id is None:
            logging.warning(f"[Cart] Product snapshot {product.id} has no id or subcategory, add rejected")
            return False

        line_id = CartService.cart_line_id(product.id, variation)
        existing_line = cart.lines.get(line_id)
        current_quantity = existing_line.quantity if existing_line else 0

        stock_ceiling = CartService._stock_ceiling(product, variation, existing_line)
        if stock_ceiling is None:
            logging.warning(f"[Cart] Product {product.id} has no stock information, add rejected")
            return False
        if current_quantity >= stock_ceiling:
            logging.debug(f"[Cart] Max stock ({stock_ceiling}) reached for line {line_id}, add ignored")
            return False

        tier_table_id = PricingService.pricing_fingerprint(
            CartService._tiers_for(tiered_pricing, cart.audience)
        )

        if existing_line is None:
            cart.lines[line_id] = CartLineDTO(
                line_id=line_id,
                product_id=product.id,
                subcategory_id=product.subcategory_id,
                category_id=product.category_id,
                product_code=product.product_code,
                product_name=product.name,
                image_url=product.image_url,
                variation={k: v for k, v in variation.items() if k != "quantity"} if variation else None,
                quantity=1,
                max_quantity=stock_ceiling,
                unit_price=Decimal(0),
                tier_table_id=tier_table_id,
                tiered_pricing=tiered_pricing
            )
            CartService.recalculate(cart, tier_table_id)
            return True

        previous_tier_table_id = existing_line.tier_table_id
        existing_line.quantity = current_quantity + 1
        existing_line.max_quantity = stock_ceiling
        existing_line.tiered_pricing = tiered_pricing
        existing_line.tier_table_id = tier_table_id

        if previous_tier_table_id != tier_table_id:
            # Catalog snapshot changed under the line: both groups are affected
            existing_line.unit_price = Decimal(0)
            CartService.recalculate(cart)
        else:
            CartService.recalculate(cart, tier_table_id)
        return True

    @staticmethod
    def remove_line(cart: CartDTO, line_id: str) -> bool:
        """
        Remove one unit of a line; the line is deleted when its quantity reaches zero.

        Returns:
            True if the cart changed, False if the line was not in the cart
        """
        line = cart.lines.get(line_id)
        if line is None:
            return False

        new_quantity = line.quantity - 1
        if new_quantity <= 0:
            del cart.lines[line_id]
        else:
            line.quantity = new_quantity

        # The group total changed either way
        CartService.recalculate(cart, line.tier_table_id)
        return True

    @staticmethod
    def recalculate(cart: CartDTO, tier_table_id: str | None = None) -> None:
        """
        Pooled recompute, for one pricing group or (tier_table_id=None) the whole cart.

        1. Partition lines by tier_table_id
        2. Sum quantity per partition
        3. Look up the unit price of that sum
        4. Write it onto every line of the partition

        Lines without pricing are never pooled and keep unit price 0.
        """
        groups: dict[str, list[CartLineDTO]] = {}
        for line in cart.lines.values():
            if line.tier_table_id == NO_PRICING:
                line.unit_price = Decimal(0)
                continue
            if tier_table_id is not None and line.tier_table_id != tier_table_id:
                continue
            groups.setdefault(line.tier_table_id, []).append(line)

        for group_id, lines in groups.items():
            group_quantity = sum(line.quantity for line in lines)
            # Lines share a fingerprint only if their tier lists are equal, so any line's list will do
            tiers = CartService._tiers_for(lines[0].tiered_pricing, cart.audience)
            group_price = PricingService.price_for_quantity(tiers, group_quantity)
            for line in lines:
                line.unit_price = group_price
            logging.debug(
                f"[Cart] Pricing group {group_id[:12]}: {len(lines)} line(s), qty={group_quantity}, unit={group_price}"
            )

    @staticmethod
    def set_audience(cart: CartDTO, audience: PricingAudience) -> None:
        """
        Switch the cart to another pricing audience (e.g. role changed mid-session).

        Every line is re-fingerprinted from its tier table snapshot and the whole
        cart is re-pooled.
        """
        if cart.audience == audience:
            return
        logging.info(f"[Cart] Pricing audience changed {cart.audience.value} → {audience.value}, re-pooling cart")
        cart.audience = audience
        for line in cart.lines.values():
            line.tier_table_id = PricingService.pricing_fingerprint(
                CartService._tiers_for(line.tiered_pricing, audience)
            )
            line.unit_price = Decimal(0)
        CartService.recalculate(cart)

    @staticmethod
    def cart_total(cart: CartDTO) -> Decimal:
        return sum((line.unit_price * line.quantity for line in cart.lines.values()), Decimal(0))

    @staticmethod
    def item_count(cart: CartDTO) -> int:
        return sum(line.quantity for line in cart.lines.values())

    @staticmethod
    def pooled_quantity(cart: CartDTO, tier_table_id: str) -> int:
        """Quantity already in the cart for a pricing group (0 for unpriced lines)."""
        if tier_table_id == NO_PRICING:
            return 0
        return sum(line.quantity for line in cart.lines.values() if line.tier_table_id == tier_table_id)

    @staticmethod
    def clear(cart: CartDTO) -> None:
        cart.lines.clear()

    @staticmethod
    def check_min_order_value(cart: CartDTO) -> MinOrderCheckDTO:
        """
        Wholesalers must reach WHOLESALER_MIN_ORDER_VALUE; retail customers have no minimum.
        """
        total = CartService.cart_total(cart)
        is_wholesaler = cart.audience == PricingAudience.WHOLESALER
        minimum_required = Decimal(config.WHOLESALER_MIN_ORDER_VALUE) if is_wholesaler else Decimal(0)
        return MinOrderCheckDTO(
            is_wholesaler=is_wholesaler,
            minimum_required=minimum_required,
            is_min_met=total >= minimum_required,
            current_total=total
        )
