# payments/tests/helpers.py

from orders.models import Order
from orders.services.order_service import attach_payment_id, place_order
from orders.tests.helpers import line, make_address, make_customer, make_product


def make_online_order(customer=None, payment_id="pay_1", price="80.00"):
    customer = customer or make_customer()
    order = place_order(
        customer=customer,
        items=[line(make_product(sku=f"SKU-{payment_id}", price=price))],
        payment_method=Order.PaymentMethod.ONLINE,
        address=make_address(customer).id,
    )
    if payment_id:
        attach_payment_id(order_id=order.id, payment_id=payment_id)
    order.refresh_from_db()
    return order
