"""
Order-related exceptions.
"""

from .base import ShopException


class OrderException(ShopException):
    """Base exception for order-related errors."""
    pass


class OrderNotFoundException(OrderException):
    """Raised when order is not found in database."""

    def __init__(self, order_id: int):
        super().__init__(
            f"Order {order_id} not found",
            details={'order_id': order_id}
        )
        self.order_id = order_id


class OrderPersistenceException(OrderException):
    """
    Raised when the order could not be stored.

    The cart is left untouched, so the customer can simply retry.
    """

    def __init__(self, reason: str):
        super().__init__(
            f"Order could not be placed: {reason}",
            details={'reason': reason}
        )
        self.reason = reason
