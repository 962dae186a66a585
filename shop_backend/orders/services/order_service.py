# orders/services/order_service.py

"""
ORDER SERVICE (APPLICATION SERVICE)

Purpose:
- Place, cancel and administer customer orders.
- Apply payment outcomes (paid / failed / refunded) coming from the
  reconciliation paths.

Hard rules:
- Pricing runs (and may fail) before anything is written.
- Order rows + items + coupon reservation commit together or not at all.
- Status and payment_status are only changed with conditional UPDATEs
  (compare-and-swap on the current value), so webhook and poll paths
  racing on the same order apply each outcome at most once.
- Money snapshots are never recomputed after placement.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from orders.models import Address, Order, OrderItem
from orders.services.exceptions import (
    AddressRequired,
    InvalidTransition,
    OrderNotFound,
    PricingError,
    RefundNotAllowed,
)
from orders.services.order_lifecycle import can_customer_cancel, validate_transition
from orders.services.pricing import resolve_order_pricing
from payments.services.moyasar import moyasar_refund_payment
from promotions.services.coupons import release_coupon_usage, reserve_coupon_usage
from promotions.services.discounts import round_money

logger = logging.getLogger(__name__)


# ============================================================
# HELPERS
# ============================================================


def _find_order(**filters) -> Order | None:
    try:
        return Order.objects.filter(**filters).first()
    except (ValidationError, ValueError):
        return None


def _strict_admin_transitions() -> bool:
    return bool(getattr(settings, "ORDERS", {}).get("STRICT_ADMIN_TRANSITIONS", False))


def _resolve_saved_address(*, customer, address) -> Address:
    if isinstance(address, Address):
        address_id = address.pk
    else:
        address_id = address

    try:
        saved = Address.objects.filter(id=address_id, user=customer).first()
    except (ValidationError, ValueError):
        saved = None

    if saved is None:
        raise AddressRequired("Address not found")
    return saved


def _new_address_fields(new_address: dict) -> dict:
    return {
        name: value
        for name, value in (new_address or {}).items()
        if name in Address.SNAPSHOT_FIELDS and value is not None
    }


def get_customer_order(*, order_id, customer) -> Order:
    order = _find_order(id=order_id, customer=customer)
    if order is None:
        raise OrderNotFound("Order not found")
    return order


def get_order(order_id) -> Order:
    order = _find_order(id=order_id)
    if order is None:
        raise OrderNotFound("Order not found")
    return order


# ============================================================
# PLACEMENT
# ============================================================


def place_order(
    *,
    customer,
    items,
    payment_method: str,
    address=None,
    new_address: dict | None = None,
    coupon_code: str | None = None,
    now=None,
) -> Order:
    """
    Price and persist an order.

    COD    -> status CONFIRMED, payment PENDING
    ONLINE -> status PENDING, payment PENDING, gateway amount stored
    """
    if payment_method not in Order.PaymentMethod.values:
        raise PricingError(f"Unsupported payment method: {payment_method}")

    saved_address = None
    if address:
        saved_address = _resolve_saved_address(customer=customer, address=address)
    elif not new_address:
        raise AddressRequired("A saved address or a new address is required")

    pricing = resolve_order_pricing(
        items=items,
        coupon_code=coupon_code,
        payment_method=payment_method,
        now=now,
    )

    if payment_method == Order.PaymentMethod.COD:
        initial_status = Order.Status.CONFIRMED
    else:
        initial_status = Order.Status.PENDING

    with transaction.atomic():
        if pricing.coupon is not None:
            # Conditional increment; raises CouponLimitReached and rolls back.
            reserve_coupon_usage(pricing.coupon.id)

        if saved_address is None:
            saved_address = Address.objects.create(
                user=customer, **_new_address_fields(new_address)
            )

        order = Order.objects.create(
            customer=customer,
            payment_method=payment_method,
            payment_status=Order.PaymentStatus.PENDING,
            status=initial_status,
            currency=pricing.currency,
            total_amount_in_smallest_unit=pricing.amount_in_smallest_unit,
            coupon=pricing.coupon,
            global_offer=pricing.global_offer,
            shipping_address=saved_address.to_snapshot(),
            **pricing.money(),
        )

        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=order,
                    product=line.product,
                    quantity=line.quantity,
                    unit_price=round_money(line.unit_price),
                    total_price=round_money(line.item_total),
                    selected_modifiers=line.selected_modifiers,
                )
                for line in pricing.lines
            ]
        )

    logger.info(
        "Order placed",
        extra={
            "order_id": str(order.id),
            "order_no": order.order_no,
            "payment_method": payment_method,
            "total_amount": str(order.total_amount),
            "coupon": pricing.coupon.code if pricing.coupon else None,
        },
    )
    return order


# ============================================================
# CANCELLATION / ADMIN STATUS
# ============================================================


def cancel_order(*, order_id, requester) -> Order:
    """
    Customer cancel: PENDING -> CANCELLED, restoring the coupon slot.
    """
    order = get_customer_order(order_id=order_id, customer=requester)

    if not can_customer_cancel(order):
        raise InvalidTransition(
            f"Order {order.order_no} cannot be cancelled in status '{order.status}'"
        )

    with transaction.atomic():
        updated = Order.objects.filter(
            id=order.id,
            status=Order.Status.PENDING,
        ).update(status=Order.Status.CANCELLED, updated_at=timezone.now())

        if not updated:
            raise InvalidTransition(
                f"Order {order.order_no} changed status while cancelling"
            )

        if order.coupon_id:
            release_coupon_usage(order.coupon_id)

    logger.info("Order cancelled by customer", extra={"order_id": str(order.id)})

    order.refresh_from_db()
    return order


def admin_update_status(*, order_id, new_status: str) -> Order:
    """
    Staff status override.

    Any known status is accepted unless ORDERS["STRICT_ADMIN_TRANSITIONS"]
    is enabled, in which case the fulfilment state machine applies.
    Entering CANCELLED releases the coupon slot in the same transaction.
    Leaving CANCELLED does not re-reserve it.
    """
    if new_status not in Order.Status.values:
        raise InvalidTransition(f"Unknown order status: {new_status}")

    order = get_order(order_id)
    previous = order.status

    if previous == new_status:
        return order

    if _strict_admin_transitions():
        validate_transition(order=order, target_status=new_status)

    with transaction.atomic():
        updated = Order.objects.filter(id=order.id, status=previous).update(
            status=new_status,
            updated_at=timezone.now(),
        )
        if not updated:
            raise InvalidTransition(
                f"Order {order.order_no} changed status concurrently"
            )

        if new_status == Order.Status.CANCELLED and order.coupon_id:
            release_coupon_usage(order.coupon_id)

    if previous == Order.Status.CANCELLED and order.coupon_id:
        # The slot released on cancellation is not taken back.
        logger.warning(
            "Cancelled order reopened by admin; coupon usage not re-reserved",
            extra={"order_id": str(order.id), "coupon_id": str(order.coupon_id)},
        )

    logger.info(
        "Order status updated by admin",
        extra={
            "order_id": str(order.id),
            "from_status": previous,
            "to_status": new_status,
        },
    )

    order.refresh_from_db()
    return order


# ============================================================
# PAYMENT OUTCOMES
# ============================================================


def attach_payment_id(*, order_id, payment_id: str) -> bool:
    """
    Store the gateway payment id. Set once; returns False if one was
    already stored.
    """
    updated = Order.objects.filter(id=order_id, payment_id__isnull=True).update(
        payment_id=payment_id,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info(
            "Payment id attached",
            extra={"order_id": str(order_id), "payment_id": payment_id},
        )
    return bool(updated)


def mark_paid(order_id) -> bool:
    """
    PENDING/FAILED -> PAID, and order PENDING -> CONFIRMED.
    Returns False when the payment was already settled (no-op).
    """
    now = timezone.now()
    with transaction.atomic():
        updated = Order.objects.filter(
            id=order_id,
            payment_status__in=[
                Order.PaymentStatus.PENDING,
                Order.PaymentStatus.FAILED,
            ],
        ).update(
            payment_status=Order.PaymentStatus.PAID,
            paid_at=now,
            updated_at=now,
        )
        if not updated:
            logger.info("mark_paid no-op", extra={"order_id": str(order_id)})
            return False

        Order.objects.filter(id=order_id, status=Order.Status.PENDING).update(
            status=Order.Status.CONFIRMED,
            updated_at=now,
        )

    logger.info("Order marked paid", extra={"order_id": str(order_id)})
    return True


def mark_failed(order_id) -> bool:
    """
    PENDING -> FAILED. Never overwrites PAID or REFUNDED.
    """
    updated = Order.objects.filter(
        id=order_id,
        payment_status=Order.PaymentStatus.PENDING,
    ).update(
        payment_status=Order.PaymentStatus.FAILED,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info("Order payment failed", extra={"order_id": str(order_id)})
    else:
        logger.info("mark_failed no-op", extra={"order_id": str(order_id)})
    return bool(updated)


def mark_refunded(order_id) -> bool:
    """
    PAID -> REFUNDED.
    """
    updated = Order.objects.filter(
        id=order_id,
        payment_status=Order.PaymentStatus.PAID,
    ).update(
        payment_status=Order.PaymentStatus.REFUNDED,
        updated_at=timezone.now(),
    )
    if updated:
        logger.info("Order refunded", extra={"order_id": str(order_id)})
    else:
        logger.info("mark_refunded no-op", extra={"order_id": str(order_id)})
    return bool(updated)


def refund_order(*, order_id) -> Order:
    """
    Admin refund of an ONLINE, PAID order through the gateway.

    A gateway failure raises PaymentGatewayError and leaves the order PAID.
    """
    order = get_order(order_id)

    if (
        order.payment_method != Order.PaymentMethod.ONLINE
        or order.payment_status != Order.PaymentStatus.PAID
        or not order.payment_id
    ):
        raise RefundNotAllowed(
            f"Order {order.order_no} is not an online paid order"
        )

    moyasar_refund_payment(
        order.payment_id,
        amount=order.total_amount_in_smallest_unit,
    )
    mark_refunded(order.id)

    order.refresh_from_db()
    return order
