# promotions/services/exceptions.py

"""
PROMOTION SERVICE ERRORS

Coupon applicability failures. All of them abort an order attempt
before anything is written.
"""


class PromotionError(Exception):
    """Base exception for offer/coupon failures."""

    code = "promotion_error"
    http_status = 400


class CouponNotFound(PromotionError):
    """Raised when no coupon matches the (upper-cased) code."""

    code = "coupon_not_found"


class CouponExpired(PromotionError):
    """Raised when the coupon is inactive or past its expiry."""

    code = "coupon_expired"


class CouponLimitReached(PromotionError):
    """Raised when the coupon has no redemptions left."""

    code = "coupon_limit_reached"


class MinPurchaseNotMet(PromotionError):
    """Raised when the post-offer amount is below the coupon minimum."""

    code = "min_purchase_not_met"
