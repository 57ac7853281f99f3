from enum import Enum


class OrderChannel(Enum):
    ONLINE = "ONLINE"      # Customer storefront checkout
    OFFLINE = "OFFLINE"    # Admin point-of-sale billing
