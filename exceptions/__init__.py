"""
Custom exceptions for the jewellery shop backend.

Exception Hierarchy:
--------------------
ShopException (base)
├── CartException
│   ├── EmptyCartException
│   ├── InvalidCartItemsException
│   └── MinimumOrderValueException
├── OrderException
│   ├── OrderNotFoundException
│   └── OrderPersistenceException
├── ProductException
│   └── ProductNotFoundException
└── NotificationException
    ├── NotificationConfigurationException
    └── NotificationDeliveryException

Usage:
------
Services raise specific exceptions:
    raise OrderNotFoundException(order_id=123)

The web layer converts them into user-facing messages:
    try:
        order = await OrderService.checkout(cart, buyer_info, session)
    except ShopException as e:
        message = handle_service_error(e, MessageEntity.USER)
"""

from .base import ShopException
from .cart import CartException, EmptyCartException, InvalidCartItemsException, MinimumOrderValueException
from .order import OrderException, OrderNotFoundException, OrderPersistenceException
from .product import ProductException, ProductNotFoundException
from .notification import (
    NotificationException,
    NotificationConfigurationException,
    NotificationDeliveryException
)

__all__ = [
    # Base
    'ShopException',

    # Cart
    'CartException',
    'EmptyCartException',
    'InvalidCartItemsException',
    'MinimumOrderValueException',

    # Order
    'OrderException',
    'OrderNotFoundException',
    'OrderPersistenceException',

    # Product
    'ProductException',
    'ProductNotFoundException',

    # Notification
    'NotificationException',
    'NotificationConfigurationException',
    'NotificationDeliveryException',
]
