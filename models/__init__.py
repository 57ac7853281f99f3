"""
Models Package

This file ensures all SQLAlchemy models are imported and registered,
which is required for relationships to work correctly.
"""

from models.base import Base
from models.category import Category
from models.subcategory import Subcategory
from models.product import Product
from models.price_tier import PriceTier
from models.order import Order
from models.orderItem import OrderItem

__all__ = [
    'Base',
    'Category',
    'Subcategory',
    'Product',
    'PriceTier',
    'Order',
    'OrderItem',
]
