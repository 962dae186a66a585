from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from catalog.models import ModifierOption, Product, ProductModifier
from catalog.services.catalog import find_modifier_option, get_product_snapshot
from promotions.models import DiscountType, Offer


class CatalogApiTests(TestCase):
    """
    GUARANTEES:
    - Anonymous users can browse active products only
    - Offer-adjusted prices are computed server-side
    """

    def setUp(self):
        self.client = APIClient()
        now = timezone.now()

        self.offer = Offer.objects.create(
            name="Twenty off",
            discount_type=DiscountType.PERCENTAGE,
            value=Decimal("20.00"),
            start_date=now - timedelta(days=1),
            end_date=now + timedelta(days=1),
        )

        self.burger = Product.objects.create(
            sku="BURGER",
            name="Burger",
            price=Decimal("100.00"),
            offer=self.offer,
        )
        size = ProductModifier.objects.create(product=self.burger, name="Size")
        ModifierOption.objects.create(modifier=size, name="Large", price=Decimal("4.00"))

        self.fries = Product.objects.create(sku="FRIES", name="Fries", price=Decimal("9.00"))
        Product.objects.create(sku="OLD", name="Retired", price=Decimal("1.00"), is_active=False)

    def _results(self, response):
        data = response.data
        return data["results"] if isinstance(data, dict) and "results" in data else data

    def test_lists_active_products_with_offer_pricing(self):
        response = self.client.get("/api/catalog/products/")

        self.assertEqual(response.status_code, 200)
        rows = {row["sku"]: row for row in self._results(response)}

        self.assertEqual(set(rows), {"BURGER", "FRIES"})
        self.assertEqual(rows["BURGER"]["final_price"], "80.00")
        self.assertEqual(rows["BURGER"]["discount"], "20.00")
        self.assertTrue(rows["BURGER"]["has_offer"])
        self.assertEqual(rows["BURGER"]["offer_name"], "Twenty off")
        self.assertEqual(rows["BURGER"]["modifiers"][0]["options"][0]["name"], "Large")

        self.assertFalse(rows["FRIES"]["has_offer"])
        self.assertEqual(rows["FRIES"]["final_price"], "9.00")

    def test_search_by_name(self):
        response = self.client.get("/api/catalog/products/", {"q": "fri"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row["sku"] for row in self._results(response)], ["FRIES"])

    def test_inactive_product_is_not_retrievable(self):
        retired = Product.objects.get(sku="OLD")
        response = self.client.get(f"/api/catalog/products/{retired.id}/")
        self.assertEqual(response.status_code, 404)

    def test_expired_offer_shows_base_price(self):
        self.offer.end_date = timezone.now() - timedelta(minutes=1)
        self.offer.save()

        response = self.client.get(f"/api/catalog/products/{self.burger.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["final_price"], "100.00")
        self.assertFalse(response.data["has_offer"])


class CatalogServiceTests(TestCase):
    def setUp(self):
        self.product = Product.objects.create(sku="PIZZA", name="Pizza", price=Decimal("40.00"))
        self.size = ProductModifier.objects.create(product=self.product, name="Size")
        self.large = ModifierOption.objects.create(
            modifier=self.size, name="Large", price=Decimal("6.00")
        )

    def test_snapshot_loads_modifiers(self):
        snapshot = get_product_snapshot(self.product.id)

        modifier, option = find_modifier_option(snapshot, self.size.id, self.large.id)

        self.assertEqual(modifier.name, "Size")
        self.assertEqual(option.name, "Large")

    def test_unknown_references_resolve_to_none(self):
        snapshot = get_product_snapshot(self.product.id)

        self.assertEqual(find_modifier_option(snapshot, "nope", self.large.id), (None, None))
        modifier, option = find_modifier_option(snapshot, self.size.id, "nope")
        self.assertEqual(modifier, self.size)
        self.assertIsNone(option)

    def test_missing_or_malformed_product_id(self):
        self.assertIsNone(get_product_snapshot("not-a-uuid"))
