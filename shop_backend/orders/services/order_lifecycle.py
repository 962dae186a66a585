"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the allowed fulfilment transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No coupon or payment mutation
- No side effects
- Single source of truth
"""

from orders.models import Order
from orders.services.exceptions import InvalidTransition

# ============================================================
# STATE DEFINITIONS
# ============================================================

FULFILLMENT_FLOW = (
    Order.Status.PENDING,
    Order.Status.CONFIRMED,
    Order.Status.PREPARING,
    Order.Status.READY_FOR_PICKUP,
    Order.Status.ASSIGNED,
    Order.Status.PICKED_UP,
    Order.Status.ON_THE_WAY,
    Order.Status.DELIVERED,
)

TERMINAL_STATES = {
    Order.Status.DELIVERED,
    Order.Status.CANCELLED,
}

ALLOWED_TRANSITIONS = {
    current: {following, Order.Status.CANCELLED}
    for current, following in zip(FULFILLMENT_FLOW, FULFILLMENT_FLOW[1:])
}

CUSTOMER_CANCELLABLE_STATES = {
    Order.Status.PENDING,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise InvalidTransition(
            f"Order {order.order_no} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def can_customer_cancel(order: Order) -> bool:
    return order.status in CUSTOMER_CANCELLABLE_STATES
