from decimal import Decimal

from pydantic import BaseModel, Field, field_validator
from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from enums.pricing_audience import PricingAudience
from models.base import Base


class PriceTier(Base):
    """
    One quantity band of a subcategory's tier table.

    Every product of the subcategory is priced from the same table, per audience:
    - Example (retail): 0-9 units: ₹100, 10+ units: ₹90

    max_quantity is NULL for the open-ended top tier.
    """
    __tablename__ = 'price_tiers'

    id = Column(Integer, primary_key=True, autoincrement=True)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=False)
    audience = Column(String(10), nullable=False)  # "retail" | "wholesale"
    min_quantity = Column(Integer, nullable=False)
    max_quantity = Column(Integer, nullable=True)
    unit_price = Column(Numeric(12, 2), nullable=False)

    subcategory = relationship("Subcategory", back_populates="price_tiers")

    __table_args__ = (
        CheckConstraint('min_quantity >= 0', name='check_min_quantity_non_negative'),
        CheckConstraint('unit_price >= 0', name='check_unit_price_non_negative'),
        CheckConstraint("audience IN ('retail', 'wholesale')", name='check_price_tier_audience'),
        Index('ix_price_tiers_subcategory_audience', 'subcategory_id', 'audience'),
    )


class PriceTierDTO(BaseModel):
    """DTO for a single price tier (min/max inclusive, max None = unbounded)."""
    min_quantity: int = Field(ge=0)
    max_quantity: int | None = None
    unit_price: Decimal = Field(ge=0)

    @field_validator("max_quantity", mode="before")
    @classmethod
    def blank_max_is_unbounded(cls, value):
        # The admin tier form submits "" for the open-ended top tier
        if isinstance(value, str) and value.strip() == "":
            return None
        return value


class TieredPricingDTO(BaseModel):
    """Tier table of a subcategory: one tier list per pricing audience."""
    retail: list[PriceTierDTO] = Field(default_factory=list)
    wholesale: list[PriceTierDTO] = Field(default_factory=list)

    def for_audience(self, audience: PricingAudience) -> list[PriceTierDTO]:
        return getattr(self, audience.tier_key)
