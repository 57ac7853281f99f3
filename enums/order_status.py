from enum import Enum


class OrderStatus(Enum):
    PENDING = "Pending"          # Created by checkout or offline billing
    PROCESSING = "Processing"    # Accepted by admin, being packed
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
