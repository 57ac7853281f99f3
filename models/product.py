from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, CheckConstraint, func

from models.base import Base


class Product(Base):
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, unique=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False)
    subcategory_id = Column(Integer, ForeignKey("subcategories.id", ondelete="CASCADE"), nullable=False)
    product_code = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    # Stock ceiling for products without variations
    quantity = Column(Integer, nullable=False, default=0)
    image_url = Column(String, nullable=True)
    # Optional variations, each with its own stock:
    # [{"color": "Gold", "size": "2.4", "quantity": 5}, ...]
    variations = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=func.now())

    __table_args__ = (
        CheckConstraint('quantity >= 0', name='check_product_quantity_non_negative'),
    )


class ProductDTO(BaseModel):
    id: int | None = None
    category_id: int | None = None
    subcategory_id: int | None = None
    product_code: str | None = None
    name: str | None = None
    quantity: int | None = None
    image_url: str | None = None
    variations: list[dict[str, Any]] | None = None
    created_at: datetime | None = None


class LowStockProductDTO(BaseModel):
    product_id: int
    product_code: str
    name: str
    quantity: int = Field(ge=0)
    variation: dict[str, Any] | None = None
