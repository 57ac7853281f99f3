import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_commit, session_rollback
from enums.order_channel import OrderChannel
from enums.order_status import OrderStatus
from exceptions.cart import EmptyCartException, InvalidCartItemsException, MinimumOrderValueException
from exceptions.order import OrderNotFoundException, OrderPersistenceException
from models.cart import CartDTO, CartLineDTO
from models.order import OrderDTO, BuyerInfoDTO, OfflineBuyerInfoDTO
from models.orderItem import OrderItemDTO
from repositories.order import OrderRepository
from repositories.product import ProductRepository
from services.cart import CartService
from services.notification import NotificationService

# Walk-in orders are billed by the admin, not by a customer account
OFFLINE_USER_ID = "admin"
GUEST_USER_ID = "guest"


class OrderService:

    @staticmethod
    def _missing_fields(line: CartLineDTO) -> list[str]:
        missing = [
            name for name in ("product_id", "product_code", "product_name", "subcategory_id", "category_id")
            if getattr(line, name) in (None, "")
        ]
        if line.quantity is None or line.quantity <= 0:
            missing.append("quantity")
        if line.unit_price is None or line.unit_price <= 0:
            missing.append("unit_price")
        if line.max_quantity is None:
            missing.append("max_quantity")
        return missing

    @staticmethod
    def validate_lines(cart: CartDTO) -> tuple[list[CartLineDTO], list[str]]:
        """
        Split cart lines into those that can be ordered and those that must be dropped.

        A line is dropped when it lacks product identity, display fields, a positive
        quantity, a positive unit price or its stock ceiling. Dropped lines are logged,
        not reported to the customer one by one.

        Returns:
            (valid_lines, dropped_line_ids)
        """
        valid_lines = []
        dropped_line_ids = []
        for line_id, line in cart.lines.items():
            missing = OrderService._missing_fields(line)
            if missing:
                logging.warning(f"[Checkout] Dropping cart line {line_id}: missing {', '.join(missing)}")
                dropped_line_ids.append(line_id)
            else:
                valid_lines.append(line)
        return valid_lines, dropped_line_ids

    @staticmethod
    def _build_items(lines: list[CartLineDTO]) -> list[OrderItemDTO]:
        return [
            OrderItemDTO(
                product_id=line.product_id,
                product_code=line.product_code,
                product_name=line.product_name,
                category_id=line.category_id,
                subcategory_id=line.subcategory_id,
                variation=line.variation,
                quantity=line.quantity,
                unit_price_at_order=line.unit_price,
                tier_table_ref=line.tier_table_id
            )
            for line in lines
        ]

    @staticmethod
    async def _decrement_stock(lines: list[CartLineDTO], order_id: int, session: Session | AsyncSession) -> int:
        """
        Write back ceiling - committed quantity for every ordered line.

        Best-effort: a failed line is logged and skipped, the order stands.

        Returns:
            Number of lines whose stock could not be updated
        """
        failed = 0
        for line in lines:
            try:
                await ProductRepository.update_stock(
                    line.product_id,
                    line.max_quantity - line.quantity,
                    session,
                    line.variation
                )
                await session_commit(session)
            except Exception as e:
                failed += 1
                logging.error(
                    f"[Checkout] Order {order_id}: stock update failed for product {line.product_id} "
                    f"(line {line.line_id}): {e}"
                )
                await session_rollback(session)
        return failed

    @staticmethod
    async def _place_order(
        cart: CartDTO,
        buyer_info: dict,
        session: Session | AsyncSession,
        user_id: str,
        channel: OrderChannel,
        shipping_fee: Decimal,
        enforce_minimum: bool
    ) -> OrderDTO:
        """
        Shared checkout pipeline.

        Flow:
        1. Reject an empty cart
        2. Enforce the wholesaler minimum order value (online only)
        3. Drop malformed lines; reject the cart if none remain
        4. Persist the order (failure: rollback, cart untouched, retryable error)
        5. Decrement stock per line, best-effort
        6. Clear the cart
        7. Announce the order (failures logged only)
        """
        if not cart.lines:
            raise EmptyCartException()

        if enforce_minimum:
            min_check = CartService.check_min_order_value(cart)
            if not min_check.is_min_met:
                raise MinimumOrderValueException(min_check.current_total, min_check.minimum_required)

        valid_lines, dropped_line_ids = OrderService.validate_lines(cart)
        if not valid_lines:
            logging.warning(f"[Checkout] All {len(dropped_line_ids)} cart line(s) invalid, checkout rejected")
            raise InvalidCartItemsException(dropped_line_ids)

        subtotal = sum((line.unit_price * line.quantity for line in valid_lines), Decimal(0))
        order_dto = OrderDTO(
            user_id=user_id,
            channel=channel,
            status=OrderStatus.PENDING,
            subtotal=subtotal,
            shipping_fee=shipping_fee,
            total_amount=subtotal + shipping_fee,
            buyer_info=buyer_info,
            created_at=datetime.now(),
            items=OrderService._build_items(valid_lines)
        )

        try:
            order_id = await OrderRepository.create(order_dto, session)
            await session_commit(session)
        except Exception as e:
            logging.error(f"[Checkout] Order could not be stored, cart kept: {e}", exc_info=True)
            await session_rollback(session)
            raise OrderPersistenceException(str(e)) from e

        order_dto.id = order_id
        logging.info(
            f"[Checkout] Order {order_id} placed ({channel.value}): {len(valid_lines)} line(s), "
            f"total={order_dto.total_amount}"
        )

        failed = await OrderService._decrement_stock(valid_lines, order_id, session)
        if failed:
            logging.warning(f"[Checkout] Order {order_id}: {failed} stock update(s) failed, stock may be inconsistent")

        CartService.clear(cart)
        await NotificationService.notify_new_order(order_dto)
        return order_dto

    @staticmethod
    async def checkout(
        cart: CartDTO,
        buyer_info: BuyerInfoDTO,
        session: Session | AsyncSession,
        user_id: str | None = None
    ) -> OrderDTO:
        """
        Storefront checkout: shipping fee added, wholesaler minimum enforced.

        Args:
            cart: Customer cart (cleared on success, untouched on failure)
            buyer_info: Billing and shipping form
            session: Database session
            user_id: Auth provider uid, None for guest checkout

        Returns:
            Stored order with its generated id

        Raises:
            EmptyCartException: Cart has no lines
            MinimumOrderValueException: Wholesaler below WHOLESALER_MIN_ORDER_VALUE
            InvalidCartItemsException: Every line failed validation
            OrderPersistenceException: Order could not be stored (retryable)
        """
        return await OrderService._place_order(
            cart,
            buyer_info.model_dump(),
            session,
            user_id=user_id or GUEST_USER_ID,
            channel=OrderChannel.ONLINE,
            shipping_fee=Decimal(config.SHIPPING_FEE),
            enforce_minimum=True
        )

    @staticmethod
    async def checkout_offline(
        cart: CartDTO,
        buyer_info: OfflineBuyerInfoDTO,
        session: Session | AsyncSession
    ) -> OrderDTO:
        """
        Admin counter billing: same pipeline as checkout(), without shipping fee or minimum order value.
        """
        return await OrderService._place_order(
            cart,
            buyer_info.model_dump(),
            session,
            user_id=OFFLINE_USER_ID,
            channel=OrderChannel.OFFLINE,
            shipping_fee=Decimal(0),
            enforce_minimum=False
        )

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: Session | AsyncSession) -> None:
        updated = await OrderRepository.update_status(order_id, status, session)
        if not updated:
            raise OrderNotFoundException(order_id)
        await session_commit(session)
        logging.info(f"[Order] Order {order_id} status set to {status.value}")
