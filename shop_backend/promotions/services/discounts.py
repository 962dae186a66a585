# promotions/services/discounts.py

"""
DISCOUNT ENGINE

Pure offer math shared by the catalog (display prices) and the
order pricing resolver.

DESIGN PRINCIPLES:
- No database access
- No rounding of intermediate values (callers round at persistence/display)
- Results never go below zero
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.utils import timezone

from promotions.models import DiscountType, Offer

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value) -> Decimal:
    """Standard (half-up) rounding to 2 places."""
    return to_decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def is_offer_active(offer, now=None) -> bool:
    if offer is None or not getattr(offer, "is_active", False):
        return False

    now = now or timezone.now()
    return offer.start_date <= now < offer.end_date


def is_product_offer_active(offer, now=None) -> bool:
    """GLOBAL offers never apply per unit, even if a product still references one."""
    if offer is None or offer.scope != Offer.Scope.PRODUCT:
        return False
    return is_offer_active(offer, now)


def compute_discount(base, discount_type: str, value) -> Decimal:
    """
    Raw discount for a base amount.

    PERCENTAGE -> base * value / 100
    FIXED      -> value (independent of base; callers clamp)
    """
    base = to_decimal(base)
    value = to_decimal(value)

    if discount_type == DiscountType.PERCENTAGE:
        return base * (value / HUNDRED)
    return value


def apply_discount(price, offer) -> Decimal:
    price = to_decimal(price)
    if offer is None:
        return price

    discount = compute_discount(price, offer.discount_type, offer.value)
    return max(ZERO, price - discount)


def calculate_discounted_price(product, now=None) -> dict:
    """
    Display pricing for a product with its (optional) product-level offer.

    Only the reported discount is rounded; final_price stays exact so that
    it matches what the order resolver charges per unit.
    """
    original_price = to_decimal(product.price)
    final_price = original_price
    discount = ZERO
    has_offer = False
    offer_name = None

    offer = getattr(product, "offer", None)
    if is_product_offer_active(offer, now):
        has_offer = True
        offer_name = offer.name
        discount = compute_discount(original_price, offer.discount_type, offer.value)
        final_price = max(ZERO, original_price - discount)

    return {
        "original_price": original_price,
        "final_price": final_price,
        "has_offer": has_offer,
        "discount": round_money(discount),
        "offer_name": offer_name,
    }
