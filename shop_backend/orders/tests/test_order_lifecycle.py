from django.test import SimpleTestCase

from orders.models import Order
from orders.services.exceptions import InvalidTransition
from orders.services.order_lifecycle import (
    FULFILLMENT_FLOW,
    TERMINAL_STATES,
    can_customer_cancel,
    can_transition,
    validate_transition,
)

S = Order.Status


class OrderLifecycleRuleTests(SimpleTestCase):
    """
    GUARANTEES:
    - Happy path is strictly linear
    - CANCELLED is reachable from every non-terminal state
    - Terminal states go nowhere
    - Customers can only cancel PENDING orders
    """

    def test_happy_path_is_linear(self):
        for current, following in zip(FULFILLMENT_FLOW, FULFILLMENT_FLOW[1:]):
            self.assertTrue(can_transition(from_status=current, to_status=following))

    def test_skipping_a_step_is_rejected(self):
        self.assertFalse(can_transition(from_status=S.CONFIRMED, to_status=S.READY_FOR_PICKUP))
        self.assertFalse(can_transition(from_status=S.PENDING, to_status=S.DELIVERED))

    def test_going_backwards_is_rejected(self):
        self.assertFalse(can_transition(from_status=S.PREPARING, to_status=S.CONFIRMED))

    def test_cancel_from_any_non_terminal_state(self):
        for status in FULFILLMENT_FLOW:
            if status in TERMINAL_STATES:
                continue
            self.assertTrue(can_transition(from_status=status, to_status=S.CANCELLED))

    def test_terminal_states(self):
        for status in (S.DELIVERED, S.CANCELLED):
            for target in S.values:
                self.assertFalse(can_transition(from_status=status, to_status=target))

    def test_validate_transition_raises(self):
        order = Order(order_no="ORD-TEST", status=S.DELIVERED)

        with self.assertRaises(InvalidTransition):
            validate_transition(order=order, target_status=S.CANCELLED)

    def test_customer_cancel_only_from_pending(self):
        self.assertTrue(can_customer_cancel(Order(status=S.PENDING)))
        self.assertFalse(can_customer_cancel(Order(status=S.CONFIRMED)))
