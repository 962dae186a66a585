# promotions/services/coupons.py

"""
COUPON SERVICE

Purpose:
- Checkout-time coupon validation (read side).
- Usage-slot reservation / release (write side).

Hard rules:
- Codes are looked up upper-cased.
- used_count is only mutated with single conditional UPDATE statements,
  so concurrent checkouts race at the database, not in Python.
- Callers run reserve/release inside the same transaction as the order write.
"""

from __future__ import annotations

import logging

from django.db.models import F, Q
from django.utils import timezone

from promotions.models import Coupon
from promotions.services.exceptions import (
    CouponExpired,
    CouponLimitReached,
    CouponNotFound,
)

logger = logging.getLogger(__name__)


def has_remaining_uses(coupon: Coupon) -> bool:
    return coupon.limit is None or coupon.used_count < coupon.limit


def get_coupon_for_checkout(code, now=None) -> Coupon:
    """
    Resolve a coupon code and check it can be redeemed right now.

    Order of checks: existence, active/expiry, usage limit.
    The minimum-purchase rule depends on the order amount and is checked
    by the pricing resolver.
    """
    normalized = Coupon.normalize_code(code)
    coupon = Coupon.objects.filter(code=normalized).first()

    if coupon is None:
        raise CouponNotFound(f"Invalid coupon code: {normalized}")

    now = now or timezone.now()
    if not coupon.is_active or coupon.expire_at < now:
        raise CouponExpired(f"Coupon {coupon.code} has expired")

    if not has_remaining_uses(coupon):
        raise CouponLimitReached(f"Coupon {coupon.code} usage limit reached")

    return coupon


def reserve_coupon_usage(coupon_id) -> None:
    """
    Atomically take one redemption slot.

    The UPDATE only matches while a slot is free, so two checkouts racing
    for the last slot cannot both succeed.
    """
    updated = (
        Coupon.objects.filter(id=coupon_id)
        .filter(Q(limit__isnull=True) | Q(used_count__lt=F("limit")))
        .update(used_count=F("used_count") + 1, updated_at=timezone.now())
    )
    if not updated:
        logger.warning("Coupon reservation lost race", extra={"coupon_id": str(coupon_id)})
        raise CouponLimitReached("Coupon usage limit reached")


def release_coupon_usage(coupon_id) -> bool:
    """
    Give back one redemption slot. Never takes used_count below zero.
    """
    updated = (
        Coupon.objects.filter(id=coupon_id, used_count__gt=0)
        .update(used_count=F("used_count") - 1, updated_at=timezone.now())
    )
    if not updated:
        logger.warning(
            "Coupon release skipped (used_count already zero)",
            extra={"coupon_id": str(coupon_id)},
        )
    return bool(updated)
