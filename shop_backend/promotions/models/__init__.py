# promotions/models/__init__.py

from .coupon import Coupon
from .offer import DiscountType, Offer

__all__ = [
    "Coupon",
    "DiscountType",
    "Offer",
]
