# orders/services/pricing.py

"""
ORDER PRICING RESOLVER

Purpose:
- Turn a requested cart (products, quantities, modifier selections, coupon)
  into the authoritative money snapshot of an order.

Hard rules (fixed order):
1. Per item: product offer applied to the base price (unrounded), then
   modifier option deltas, then item_total = unit_price * quantity.
2. The single active GLOBAL offer, against the aggregate, clamped to it.
3. The coupon, against total - global discount, clamped to that amount.
4. final_total = max(0, total - global - coupon).
5. Smallest-unit gateway amount for ONLINE orders only.

Notes:
- Nothing is written here. Every failure raises before the caller
  persists anything, so a failed attempt never leaves a partial order.
- Running totals stay unrounded; money is quantized by the caller at
  persistence (see PricingResult.money()).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from django.utils import timezone

from catalog.services.catalog import find_modifier_option, get_product_snapshot
from orders.models import Order
from orders.services.exceptions import PricingError, ProductUnavailable
from payments.services.moyasar import default_currency, to_smallest_unit
from promotions.services.coupons import get_coupon_for_checkout
from promotions.services.discounts import (
    ZERO,
    apply_discount,
    compute_discount,
    is_product_offer_active,
    round_money,
    to_decimal,
)
from promotions.services.exceptions import MinPurchaseNotMet
from promotions.services.offers import get_active_global_offer


@dataclass
class PricedLine:
    product: object
    quantity: int
    unit_price: Decimal
    item_total: Decimal
    selected_modifiers: list = field(default_factory=list)


@dataclass
class PricingResult:
    lines: list
    total_amount: Decimal
    global_discount: Decimal
    coupon_discount: Decimal
    final_total: Decimal
    currency: str
    amount_in_smallest_unit: int | None = None
    coupon: object = None
    global_offer: object = None

    @property
    def discount_amount(self) -> Decimal:
        return self.global_discount + self.coupon_discount

    def money(self) -> dict:
        """Persistence view: every amount quantized to 2dp half-up."""
        return {
            "subtotal_amount": round_money(self.total_amount),
            "discount_amount": round_money(self.discount_amount),
            "total_amount": round_money(self.final_total),
        }


def _to_quantity(value) -> int:
    if isinstance(value, bool):
        raise PricingError("quantity must be a whole number")

    if isinstance(value, int):
        qty = value
    elif isinstance(value, str) and value.strip().isdigit():
        qty = int(value.strip())
    else:
        raise PricingError("quantity must be a whole number")

    if qty < 1:
        raise PricingError("quantity must be at least 1")
    return qty


def _price_line(item: dict, now) -> PricedLine:
    product_id = item.get("product_id")
    product = get_product_snapshot(product_id) if product_id else None
    if product is None or not product.is_active:
        raise ProductUnavailable(f"Product {product_id} is not available")

    quantity = _to_quantity(item.get("quantity"))

    unit_price = to_decimal(product.price)
    if is_product_offer_active(product.offer, now):
        unit_price = apply_discount(unit_price, product.offer)

    selected = []
    for selection in item.get("modifiers") or []:
        modifier, option = find_modifier_option(
            product,
            selection.get("modifier_id"),
            selection.get("option_id"),
        )
        # Unknown modifier/option references are skipped, not rejected.
        if modifier is None or option is None:
            continue

        unit_price += to_decimal(option.price)
        selected.append(
            {
                "modifier_name": modifier.name,
                "option_name": option.name,
                "price": f"{round_money(option.price):.2f}",
            }
        )

    return PricedLine(
        product=product,
        quantity=quantity,
        unit_price=unit_price,
        item_total=unit_price * quantity,
        selected_modifiers=selected,
    )


def resolve_order_pricing(
    *,
    items,
    coupon_code=None,
    payment_method,
    now=None,
) -> PricingResult:
    """
    Price a cart. Raises ProductUnavailable / PricingError or a
    promotions coupon error; never writes.
    """
    if not items:
        raise PricingError("Order must contain at least one item")

    now = now or timezone.now()

    # 1) Lines (product offer applied per unit, before aggregation)
    lines = [_price_line(item, now) for item in items]
    total_amount = sum((line.item_total for line in lines), ZERO)

    # 2) Global offer
    global_offer = get_active_global_offer(now)
    global_discount = ZERO
    if global_offer is not None:
        global_discount = compute_discount(
            total_amount, global_offer.discount_type, global_offer.value
        )
        global_discount = min(max(ZERO, global_discount), total_amount)

    # 3) Coupon (against the post-global amount)
    coupon = None
    coupon_discount = ZERO
    if coupon_code:
        coupon = get_coupon_for_checkout(coupon_code, now)

        taxable_amount = total_amount - global_discount
        if coupon.min_purchase is not None and taxable_amount < coupon.min_purchase:
            raise MinPurchaseNotMet(
                f"Minimum purchase for coupon {coupon.code} is {coupon.min_purchase}"
            )

        coupon_discount = compute_discount(
            taxable_amount, coupon.discount_type, coupon.value
        )
        coupon_discount = min(max(ZERO, coupon_discount), taxable_amount)

    # 4) Final
    final_total = max(ZERO, total_amount - global_discount - coupon_discount)

    # 5) Gateway amount
    currency = default_currency()
    amount_in_smallest_unit = None
    if payment_method == Order.PaymentMethod.ONLINE:
        amount_in_smallest_unit = to_smallest_unit(final_total, currency)

    return PricingResult(
        lines=lines,
        total_amount=total_amount,
        global_discount=global_discount,
        coupon_discount=coupon_discount,
        final_total=final_total,
        currency=currency,
        amount_in_smallest_unit=amount_in_smallest_unit,
        coupon=coupon,
        global_offer=global_offer,
    )
