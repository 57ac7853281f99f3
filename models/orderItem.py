from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Column, Integer, String, Numeric, JSON, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base import Base


# Snapshot of a cart line at checkout. product_id is not a foreign key: orders outlive products.
class OrderItem(Base):
    __tablename__ = 'order_items'

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_positive_quantity'),
        CheckConstraint('unit_price_at_order >= 0', name='ck_order_item_non_negative_price'),
        Index('ix_order_items_order_id', 'order_id'),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)
    product_id = Column(Integer, nullable=False)
    product_code = Column(String, nullable=False)
    product_name = Column(String, nullable=False)
    category_id = Column(Integer, nullable=False)
    subcategory_id = Column(Integer, nullable=False)
    variation = Column(JSON, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price_at_order = Column(Numeric(12, 2), nullable=False)
    # Pricing group fingerprint the unit price was derived from
    tier_table_ref = Column(String, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderItemDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    order_id: int | None = None
    product_id: int | None = None
    product_code: str | None = None
    product_name: str | None = None
    category_id: int | None = None
    subcategory_id: int | None = None
    variation: dict[str, Any] | None = None
    quantity: int | None = None
    unit_price_at_order: Decimal | None = None
    tier_table_ref: str | None = None
