from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from catalog.models import Product
from promotions.models import Coupon, DiscountType, Offer
from promotions.services.coupons import (
    get_coupon_for_checkout,
    release_coupon_usage,
    reserve_coupon_usage,
)
from promotions.services.exceptions import (
    CouponExpired,
    CouponLimitReached,
    CouponNotFound,
)
from promotions.services.offers import get_active_global_offer

User = get_user_model()


def make_coupon(code="SAVE10", **overrides):
    data = {
        "code": code,
        "discount_type": DiscountType.PERCENTAGE,
        "value": Decimal("10.00"),
        "expire_at": timezone.now() + timedelta(days=7),
    }
    data.update(overrides)
    return Coupon.objects.create(**data)


class CouponCheckoutTests(TestCase):
    """
    GUARANTEES:
    - Codes are case-insensitive and stored upper-cased
    - Checks run in order: existence, active/expiry, usage limit
    """

    def test_code_is_stored_upper_cased_and_looked_up_case_insensitively(self):
        coupon = make_coupon(code="  welcome10 ")

        self.assertEqual(coupon.code, "WELCOME10")
        self.assertEqual(get_coupon_for_checkout("Welcome10").id, coupon.id)

    def test_unknown_code(self):
        with self.assertRaises(CouponNotFound):
            get_coupon_for_checkout("NOPE")

    def test_inactive_coupon_is_reported_expired(self):
        make_coupon(is_active=False)
        with self.assertRaises(CouponExpired):
            get_coupon_for_checkout("SAVE10")

    def test_past_expiry(self):
        make_coupon(expire_at=timezone.now() - timedelta(minutes=1))
        with self.assertRaises(CouponExpired):
            get_coupon_for_checkout("SAVE10")

    def test_limit_reached(self):
        make_coupon(limit=5, used_count=5)
        with self.assertRaises(CouponLimitReached):
            get_coupon_for_checkout("SAVE10")

    def test_unlimited_coupon_is_always_redeemable(self):
        make_coupon(limit=None, used_count=1000)
        self.assertEqual(get_coupon_for_checkout("SAVE10").code, "SAVE10")


class CouponUsageTests(TestCase):
    # =====================================================
    # RESERVE / RELEASE
    # =====================================================

    def test_reserve_increments_until_limit(self):
        coupon = make_coupon(limit=2)

        reserve_coupon_usage(coupon.id)
        reserve_coupon_usage(coupon.id)

        with self.assertRaises(CouponLimitReached):
            reserve_coupon_usage(coupon.id)

        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 2)

    def test_release_restores_slot_and_never_goes_negative(self):
        coupon = make_coupon(limit=3, used_count=1)

        self.assertTrue(release_coupon_usage(coupon.id))
        self.assertFalse(release_coupon_usage(coupon.id))

        coupon.refresh_from_db()
        self.assertEqual(coupon.used_count, 0)

    def test_database_rejects_used_count_above_limit(self):
        coupon = make_coupon(limit=1, used_count=1)

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Coupon.objects.filter(id=coupon.id).update(used_count=2)


class GlobalOfferSelectionTests(TestCase):
    def test_most_recently_created_active_global_offer_wins(self):
        now = timezone.now()
        common = {
            "discount_type": DiscountType.FIXED,
            "value": Decimal("5.00"),
            "scope": Offer.Scope.GLOBAL,
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=1),
        }
        Offer.objects.create(name="Older", **common)
        newer = Offer.objects.create(name="Newer", **common)
        Offer.objects.create(name="Inactive", is_active=False, **common)
        Offer.objects.create(
            name="Product only",
            **{**common, "scope": Offer.Scope.PRODUCT},
        )

        self.assertEqual(get_active_global_offer(now).id, newer.id)

    def test_no_active_global_offer(self):
        self.assertIsNone(get_active_global_offer())

    def test_database_rejects_non_positive_value_and_backwards_window(self):
        now = timezone.now()
        common = {
            "name": "Broken",
            "discount_type": DiscountType.FIXED,
            "value": Decimal("5.00"),
            "start_date": now - timedelta(days=1),
            "end_date": now + timedelta(days=1),
        }

        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Offer.objects.create(**{**common, "value": Decimal("0.00")})
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Offer.objects.create(**{**common, "end_date": common["start_date"]})


class PromotionsAdminApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="admin",
            password="pass",
            is_staff=True,
        )
        self.customer = User.objects.create_user(username="customer", password="pass")

    def test_customer_cannot_manage_coupons(self):
        self.client.force_authenticate(self.customer)
        response = self.client.get("/api/admin/coupons/")
        self.assertEqual(response.status_code, 403)

    def test_create_coupon_normalizes_code(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            "/api/admin/coupons/",
            {
                "code": "summer-24",
                "discount_type": "PERCENTAGE",
                "value": "15.00",
                "limit": 50,
                "expire_at": (timezone.now() + timedelta(days=30)).isoformat(),
            },
            format="json",
        )

        self.assertEqual(response.status_code, 201, response.data)
        self.assertEqual(response.data["code"], "SUMMER-24")
        self.assertEqual(response.data["used_count"], 0)

    def test_invalid_coupon_code_rejected(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post(
            "/api/admin/coupons/",
            {
                "code": "a!",
                "discount_type": "FIXED",
                "value": "5.00",
                "expire_at": (timezone.now() + timedelta(days=30)).isoformat(),
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("code", response.data)

    def test_product_offer_requires_products_and_attaches_them(self):
        self.client.force_authenticate(self.admin)
        product = Product.objects.create(sku="TEA", name="Tea", price=Decimal("8.00"))
        now = timezone.now()
        payload = {
            "name": "Tea time",
            "discount_type": "PERCENTAGE",
            "value": "10.00",
            "scope": "PRODUCT",
            "start_date": (now - timedelta(days=1)).isoformat(),
            "end_date": (now + timedelta(days=1)).isoformat(),
        }

        response = self.client.post("/api/admin/offers/", payload, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertIn("product_ids", response.data)

        payload["product_ids"] = [str(product.id)]
        response = self.client.post("/api/admin/offers/", payload, format="json")
        self.assertEqual(response.status_code, 201, response.data)

        product.refresh_from_db()
        self.assertEqual(str(product.offer_id), response.data["id"])

    def test_switching_offer_to_global_detaches_its_products(self):
        self.client.force_authenticate(self.admin)
        now = timezone.now()
        offer = Offer.objects.create(
            name="Tea time",
            discount_type=DiscountType.PERCENTAGE,
            value=Decimal("10.00"),
            scope=Offer.Scope.PRODUCT,
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
        )
        product = Product.objects.create(
            sku="TEA", name="Tea", price=Decimal("100.00"), offer=offer
        )

        response = self.client.patch(
            f"/api/admin/offers/{offer.id}/", {"scope": "GLOBAL"}, format="json"
        )
        self.assertEqual(response.status_code, 200, response.data)
        self.assertEqual(response.data["products_count"], 0)

        product.refresh_from_db()
        self.assertIsNone(product.offer_id)

    def test_offer_end_must_follow_start(self):
        self.client.force_authenticate(self.admin)
        now = timezone.now()
        response = self.client.post(
            "/api/admin/offers/",
            {
                "name": "Backwards",
                "discount_type": "FIXED",
                "value": "5.00",
                "scope": "GLOBAL",
                "start_date": now.isoformat(),
                "end_date": (now - timedelta(days=1)).isoformat(),
            },
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("end_date", response.data)
