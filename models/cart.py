# The cart lives with the shopper's session and is never persisted as such. Only the
# order created at checkout is stored. Prices on the lines are derived: they are rewritten
# by the pooled recompute after every mutation and must never be set by callers.
#
# Stock ceilings are captured when a line is added and not re-read at checkout.
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from enums.pricing_audience import PricingAudience
from models.price_tier import TieredPricingDTO


class CartLineDTO(BaseModel):
    line_id: str
    product_id: int
    subcategory_id: int
    quantity: int = Field(ge=1)
    max_quantity: int = Field(ge=0)
    tier_table_id: str
    unit_price: Decimal = Decimal(0)
    tiered_pricing: TieredPricingDTO | None = None
    variation: dict[str, Any] | None = None
    # Display/order fields, checked again at checkout
    category_id: int | None = None
    product_code: str | None = None
    product_name: str | None = None
    image_url: str | None = None


class CartDTO(BaseModel):
    audience: PricingAudience = PricingAudience.RETAIL
    lines: dict[str, CartLineDTO] = Field(default_factory=dict)


class MinOrderCheckDTO(BaseModel):
    is_wholesaler: bool
    minimum_required: Decimal
    is_min_met: bool
    current_total: Decimal
