"""
Cart-related exceptions.

Rejected cart mutations (adding past the stock ceiling, removing an unknown
line) are not errors and never raise; these exceptions belong to checkout.
"""
from decimal import Decimal

from .base import ShopException


class CartException(ShopException):
    """Base exception for cart-related errors."""
    pass


class EmptyCartException(CartException):
    """Raised when trying to checkout with an empty cart."""

    def __init__(self):
        super().__init__("Cart is empty")


class InvalidCartItemsException(CartException):
    """Raised when validation drops every line of the cart at checkout."""

    def __init__(self, dropped_line_ids: list[str]):
        super().__init__(
            "Cart contains invalid items",
            details={'dropped_line_ids': dropped_line_ids}
        )
        self.dropped_line_ids = dropped_line_ids


class MinimumOrderValueException(CartException):
    """Raised when a wholesaler checks out below the minimum order value."""

    def __init__(self, current_total: Decimal, minimum_required: Decimal):
        super().__init__(
            f"Order total {current_total} is below the minimum order value {minimum_required}",
            details={'current_total': current_total, 'minimum_required': minimum_required}
        )
        self.current_total = current_total
        self.minimum_required = minimum_required
