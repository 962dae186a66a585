# catalog/serializers/product.py

"""
PRODUCT SERIALIZER (STOREFRONT)

Purpose:
- Read-only product payload for the storefront.
- Offer-adjusted prices come from the discount engine; the frontend never
  computes prices itself.
"""

from rest_framework import serializers

from catalog.models import ModifierOption, Product, ProductModifier
from promotions.services.discounts import calculate_discounted_price, round_money


class ModifierOptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = ModifierOption
        fields = ["id", "name", "price", "position"]
        read_only_fields = fields


class ProductModifierSerializer(serializers.ModelSerializer):
    options = ModifierOptionSerializer(many=True, read_only=True)

    class Meta:
        model = ProductModifier
        fields = ["id", "name", "position", "options"]
        read_only_fields = fields


class ProductSerializer(serializers.ModelSerializer):
    """
    GUARANTEES:
    - original_price / final_price / discount reflect the product offer
      only while it is active
    - discount is rounded half-up to 2dp, final_price to 2dp for display
    """

    modifiers = ProductModifierSerializer(many=True, read_only=True)

    original_price = serializers.SerializerMethodField()
    final_price = serializers.SerializerMethodField()
    has_offer = serializers.SerializerMethodField()
    discount = serializers.SerializerMethodField()
    offer_name = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "id",
            "sku",
            "name",
            "description",
            "price",
            "original_price",
            "final_price",
            "has_offer",
            "discount",
            "offer_name",
            "modifiers",
            "is_active",
        ]
        read_only_fields = fields

    def _pricing(self, obj) -> dict:
        cache = self.context.setdefault("_pricing_cache", {})
        if obj.id not in cache:
            cache[obj.id] = calculate_discounted_price(obj)
        return cache[obj.id]

    def get_original_price(self, obj) -> str:
        return f"{self._pricing(obj)['original_price']:.2f}"

    def get_final_price(self, obj) -> str:
        return f"{round_money(self._pricing(obj)['final_price']):.2f}"

    def get_has_offer(self, obj) -> bool:
        return self._pricing(obj)["has_offer"]

    def get_discount(self, obj) -> str:
        return f"{self._pricing(obj)['discount']:.2f}"

    def get_offer_name(self, obj):
        return self._pricing(obj)["offer_name"]
