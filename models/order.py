from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field
from sqlalchemy import Column, Integer, DateTime, String, Numeric, JSON, func, CheckConstraint, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.order_channel import OrderChannel
from enums.order_status import OrderStatus
from models.base import Base
from models.orderItem import OrderItemDTO


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    # Auth provider uid, "guest" for anonymous checkout, "admin" for offline billing
    user_id = Column(String, nullable=False, default="guest")
    channel = Column(SQLEnum(OrderChannel), nullable=False, default=OrderChannel.ONLINE)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_fee = Column(Numeric(12, 2), nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False)
    # Billing/shipping form as submitted
    buyer_info = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin")

    __table_args__ = (
        CheckConstraint('total_amount >= 0', name='check_order_total_amount_non_negative'),
        Index('ix_orders_created_at', 'created_at'),
    )


class BuyerInfoDTO(BaseModel):
    """Billing & shipping details collected by the storefront checkout form."""
    full_name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    address_line1: str = Field(min_length=1)
    address_line2: str | None = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    pincode: str = Field(min_length=1)


class OfflineBuyerInfoDTO(BaseModel):
    """Walk-in customer details entered by the admin at the counter."""
    full_name: str = Field(min_length=1)
    phone_number: str | None = None


class OrderDTO(BaseModel):
    id: int | None = None
    user_id: str | None = None
    channel: OrderChannel | None = None
    status: OrderStatus | None = None
    subtotal: Decimal | None = None
    shipping_fee: Decimal | None = None
    total_amount: Decimal | None = None
    buyer_info: dict | None = None
    created_at: datetime | None = None
    items: list[OrderItemDTO] = Field(default_factory=list)
