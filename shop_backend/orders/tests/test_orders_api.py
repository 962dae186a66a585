from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from orders.models import Order
from orders.services.order_service import attach_payment_id, mark_paid, place_order
from orders.tests.helpers import (
    line,
    make_address,
    make_coupon,
    make_customer,
    make_offer,
    make_product,
    make_staff,
)
from promotions.models import Coupon, Offer


def _results(response):
    data = response.data
    return data["results"] if isinstance(data, dict) and "results" in data else data


class CustomerOrderApiTests(TestCase):
    """
    GUARANTEES:
    - Orders are priced server-side; client amounts are ignored
    - Customers only see and cancel their own orders
    - Domain failures use the {"error": {"code", "message"}} envelope
    """

    def setUp(self):
        self.client = APIClient()
        self.customer = make_customer()
        self.address = make_address(self.customer)
        self.product = make_product(price="100.00")
        self.client.force_authenticate(self.customer)

    def _payload(self, **overrides):
        data = {
            "items": [{"product_id": str(self.product.id), "quantity": 1}],
            "payment_method": "COD",
            "address_id": str(self.address.id),
        }
        data.update(overrides)
        return data

    def test_requires_authentication(self):
        response = APIClient().get("/api/orders/")
        self.assertEqual(response.status_code, 401)

    def test_place_cod_order(self):
        response = self.client.post(
            "/api/orders/",
            self._payload(total_amount="1.00"),
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], "CONFIRMED")
        self.assertEqual(response.data["payment_status"], "PENDING")
        self.assertEqual(response.data["total_amount"], "100.00")
        self.assertEqual(len(response.data["items"]), 1)
        self.assertEqual(response.data["items"][0]["sku"], "BURGER")

    def test_place_online_order_returns_gateway_amount(self):
        """
        Product 100, product offer none, global 10% -> 90, coupon 10% -> 81.
        """
        make_offer(scope=Offer.Scope.GLOBAL, value="10.00", name="Store wide")
        make_coupon("SAVE10")

        response = self.client.post(
            "/api/orders/",
            self._payload(payment_method="ONLINE", coupon_code="save10"),
            format="json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["total_amount"], "81.00")
        self.assertEqual(response.data["total_amount_in_smallest_unit"], 8100)
        self.assertEqual(response.data["currency"], "SAR")
        self.assertNotIn("items", response.data)

        order = Order.objects.get(id=response.data["id"])
        self.assertEqual(order.status, Order.Status.PENDING)
        self.assertEqual(str(order.discount_amount), "19.00")

    def test_place_order_with_new_address(self):
        payload = self._payload(
            new_address={"full_name": "Omar", "phone": "0500", "line1": "St 9", "city": "Jeddah"}
        )
        payload.pop("address_id")

        response = self.client.post("/api/orders/", payload, format="json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["shipping_address"]["city"], "Jeddah")

    def test_address_is_required(self):
        payload = self._payload()
        payload.pop("address_id")

        response = self.client.post("/api/orders/", payload, format="json")

        self.assertEqual(response.status_code, 400)
        self.assertIn("address_id", response.data)

    def test_invalid_coupon_uses_error_envelope(self):
        response = self.client.post(
            "/api/orders/",
            self._payload(coupon_code="NOPE"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "coupon_not_found")
        self.assertEqual(Order.objects.count(), 0)

    def test_exhausted_coupon_is_rejected(self):
        make_coupon("FULL", limit=5, used_count=5)

        response = self.client.post(
            "/api/orders/",
            self._payload(coupon_code="FULL"),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "coupon_limit_reached")
        self.assertEqual(Coupon.objects.get(code="FULL").used_count, 5)

    def test_inactive_product_is_rejected(self):
        retired = make_product(sku="OLD", is_active=False)

        response = self.client.post(
            "/api/orders/",
            self._payload(items=[{"product_id": str(retired.id), "quantity": 1}]),
            format="json",
        )

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "product_unavailable")

    def test_quote_does_not_write(self):
        make_coupon("SAVE10")

        response = self.client.post(
            "/api/orders/quote/",
            {
                "items": [{"product_id": str(self.product.id), "quantity": 2}],
                "coupon_code": "save10",
            },
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["total_amount"], "200.00")
        self.assertEqual(response.data["coupon_discount"], "20.00")
        self.assertEqual(response.data["final_total"], "180.00")
        self.assertEqual(response.data["amount_in_smallest_unit"], 18000)
        self.assertEqual(response.data["coupon_code"], "SAVE10")
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(Coupon.objects.get(code="SAVE10").used_count, 0)

    def test_list_and_retrieve_only_own_orders(self):
        mine = place_order(
            customer=self.customer,
            items=[line(self.product)],
            payment_method="COD",
            address=self.address.id,
        )
        other = make_customer("other")
        theirs = place_order(
            customer=other,
            items=[line(self.product)],
            payment_method="COD",
            address=make_address(other).id,
        )

        response = self.client.get("/api/orders/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["id"] for row in _results(response)], [str(mine.id)])

        response = self.client.get(f"/api/orders/{theirs.id}/")
        self.assertEqual(response.status_code, 404)

    def test_cancel_pending_online_order(self):
        order = place_order(
            customer=self.customer,
            items=[line(self.product)],
            payment_method="ONLINE",
            address=self.address.id,
        )

        response = self.client.post(f"/api/orders/{order.id}/cancel/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "CANCELLED")

    def test_cancel_confirmed_order_is_rejected(self):
        order = place_order(
            customer=self.customer,
            items=[line(self.product)],
            payment_method="COD",
            address=self.address.id,
        )

        response = self.client.post(f"/api/orders/{order.id}/cancel/")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "invalid_transition")

    def test_cancel_someone_elses_order_is_not_found(self):
        other = make_customer("other")
        order = place_order(
            customer=other,
            items=[line(self.product)],
            payment_method="ONLINE",
            address=make_address(other).id,
        )

        response = self.client.post(f"/api/orders/{order.id}/cancel/")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["code"], "order_not_found")


class AdminOrderApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.staff = make_staff()
        self.customer = make_customer(email="sara@example.com")
        self.product = make_product(price="40.00")
        address = make_address(self.customer)

        self.cod = place_order(
            customer=self.customer,
            items=[line(self.product)],
            payment_method="COD",
            address=address.id,
        )
        self.online = place_order(
            customer=self.customer,
            items=[line(self.product, 2)],
            payment_method="ONLINE",
            address=address.id,
        )

    def test_customer_cannot_use_admin_endpoints(self):
        self.client.force_authenticate(self.customer)

        response = self.client.get("/api/admin/orders/")

        self.assertEqual(response.status_code, 403)

    def test_list_with_filters(self):
        self.client.force_authenticate(self.staff)

        response = self.client.get("/api/admin/orders/")
        self.assertEqual(len(_results(response)), 2)

        response = self.client.get("/api/admin/orders/", {"payment_method": "online"})
        rows = _results(response)
        self.assertEqual([row["id"] for row in rows], [str(self.online.id)])
        self.assertEqual(rows[0]["customer_email"], "sara@example.com")

        response = self.client.get("/api/admin/orders/", {"status": "CONFIRMED"})
        self.assertEqual([row["id"] for row in _results(response)], [str(self.cod.id)])

        response = self.client.get("/api/admin/orders/", {"q": self.cod.order_no})
        self.assertEqual([row["id"] for row in _results(response)], [str(self.cod.id)])

    def test_status_override(self):
        self.client.force_authenticate(self.staff)

        response = self.client.patch(
            f"/api/admin/orders/{self.cod.id}/status/",
            {"status": "PREPARING"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "PREPARING")

    def test_status_override_rejects_unknown_status(self):
        self.client.force_authenticate(self.staff)

        response = self.client.patch(
            f"/api/admin/orders/{self.cod.id}/status/",
            {"status": "LOST"},
            format="json",
        )

        self.assertEqual(response.status_code, 400)

    @mock.patch("orders.services.order_service.moyasar_refund_payment")
    def test_refund_online_paid_order(self, refund_mock):
        attach_payment_id(order_id=self.online.id, payment_id="pay_abc")
        mark_paid(self.online.id)
        self.client.force_authenticate(self.staff)

        response = self.client.post(f"/api/admin/orders/{self.online.id}/refund/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["payment_status"], "REFUNDED")
        refund_mock.assert_called_once_with("pay_abc", amount=8000)

    def test_refund_cod_order_is_rejected(self):
        self.client.force_authenticate(self.staff)

        response = self.client.post(f"/api/admin/orders/{self.cod.id}/refund/")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["code"], "refund_not_allowed")
