"""
Error Handler Utility

Provides centralized error handling for the storefront and admin surfaces with:
- Localized error messages
- Automatic exception to message mapping
- Logging for debugging

Usage:
    from utils.error_handler import handle_service_error

    try:
        order = await OrderService.checkout(cart, buyer_info, session)
    except ShopException as e:
        error_message = handle_service_error(e)
"""

import logging
from decimal import Decimal

from enums.message_entity import MessageEntity
from exceptions import (
    ShopException,
    EmptyCartException,
    InvalidCartItemsException,
    MinimumOrderValueException,
    OrderNotFoundException,
    OrderPersistenceException,
    ProductNotFoundException,
    NotificationConfigurationException,
    NotificationDeliveryException,
)
from utils.localizator import Localizator

ERROR_MAPPING = {
    # Cart exceptions
    EmptyCartException: "error_empty_cart",
    InvalidCartItemsException: "error_invalid_cart_items",
    MinimumOrderValueException: "error_min_order_value",

    # Order exceptions
    OrderNotFoundException: "error_order_not_found",
    OrderPersistenceException: "error_order_failed",

    # Product exceptions
    ProductNotFoundException: "error_product_not_found",

    # Notification exceptions (admin only)
    NotificationConfigurationException: "error_notification_config",
    NotificationDeliveryException: "error_notification_delivery",
}

FORMAT_ATTRIBUTES = ("order_id", "product_id", "reason", "status", "current_total", "minimum_required")


def handle_service_error(exception: ShopException, entity: MessageEntity = MessageEntity.USER) -> str:
    """
    Convert a service exception into a localized message.

    Args:
        exception: Exception raised by a service
        entity: Audience of the message (USER for the storefront, ADMIN for the back-office)

    Returns:
        Localized, formatted error message
    """
    localization_key = ERROR_MAPPING.get(type(exception))

    if not localization_key:
        logging.error(f"Unmapped exception type: {type(exception).__name__}")
        return Localizator.get_text(entity, "error_unexpected")

    exception_data = {"currency": Localizator.get_currency_symbol()}
    for attribute in FORMAT_ATTRIBUTES:
        if hasattr(exception, attribute):
            value = getattr(exception, attribute)
            exception_data[attribute] = f"{value:.2f}" if isinstance(value, Decimal) else value

    try:
        return Localizator.get_text(entity, localization_key).format(**exception_data)
    except KeyError as e:
        # Missing formatting parameter (or key missing for this entity)
        logging.error(f"Missing localization for {localization_key} ({entity.name}): {e}")
        return Localizator.get_text(entity, "error_unexpected")


def handle_unexpected_error(exception: Exception, entity: MessageEntity = MessageEntity.ADMIN) -> str:
    """
    Handle unexpected exceptions (non-ShopException).

    Logs the full exception and returns the generic message.
    """
    logging.error(f"Unexpected error: {type(exception).__name__} - {str(exception)}", exc_info=True)
    return Localizator.get_text(entity, "error_unexpected")
