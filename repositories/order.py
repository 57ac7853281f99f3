import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from enums.order_status import OrderStatus
from models.order import Order, OrderDTO
from models.orderItem import OrderItem

logger = logging.getLogger(__name__)


class OrderRepository:

    @staticmethod
    async def create(order_dto: OrderDTO, session: Session | AsyncSession) -> int:
        """
        Store an order together with its items.

        No idempotency key is attached: submitting the same cart twice creates two orders.

        Returns:
            Generated order ID
        """
        order = Order(
            user_id=order_dto.user_id,
            channel=order_dto.channel,
            status=order_dto.status,
            subtotal=order_dto.subtotal,
            shipping_fee=order_dto.shipping_fee,
            total_amount=order_dto.total_amount,
            buyer_info=order_dto.buyer_info,
            created_at=order_dto.created_at or datetime.now(),
            items=[
                OrderItem(**item.model_dump(exclude={"id", "order_id"}))
                for item in order_dto.items
            ]
        )
        session.add(order)
        await session_flush(session)
        logger.info(f"[Order] Created order {order.id} with {len(order_dto.items)} item(s)")
        return order.id

    @staticmethod
    async def get_by_id(order_id: int, session: Session | AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        result = await session_execute(stmt, session)
        order = result.scalar()
        if order is None:
            return None
        return OrderDTO.model_validate(order, from_attributes=True)

    @staticmethod
    async def get_created_between(
        session: Session | AsyncSession,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int | None = None,
        offset: int = 0
    ) -> list[OrderDTO]:
        """
        Get orders newest first, optionally restricted to [start, end].

        Args:
            session: Database session
            start: Inclusive lower bound on created_at
            end: Inclusive upper bound on created_at
            limit: Page size (None = all)
            offset: Number of orders to skip
        """
        stmt = select(Order)
        if start is not None:
            stmt = stmt.where(Order.created_at >= start)
        if end is not None:
            stmt = stmt.where(Order.created_at <= end)
        stmt = stmt.order_by(Order.created_at.desc(), Order.id.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in result.scalars().all()]

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: Session | AsyncSession) -> bool:
        """
        Returns:
            True if the order existed and was updated
        """
        stmt = update(Order).where(Order.id == order_id).values(status=status)
        result = await session_execute(stmt, session)
        return result.rowcount > 0
