# promotions/api/serializers.py

"""
PROMOTIONS SERIALIZERS (STAFF)

Rules:
- Coupon codes: 3-20 chars of [A-Z0-9_-], stored upper-cased.
- used_count is read-only (only checkout/cancellation move it).
- Offers: end_date must be after start_date.
- PRODUCT-scope offers attach to products via product_ids.
"""

from __future__ import annotations

import re

from rest_framework import serializers

from catalog.models import Product
from promotions.models import Coupon, Offer

COUPON_CODE_RE = re.compile(r"^[A-Z0-9_-]{3,20}$")


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "discount_type",
            "value",
            "min_purchase",
            "limit",
            "used_count",
            "expire_at",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "used_count", "created_at", "updated_at"]

    def validate_code(self, value):
        code = Coupon.normalize_code(value)
        if not COUPON_CODE_RE.match(code):
            raise serializers.ValidationError(
                "Code must be 3-20 characters of letters, numbers, - and _"
            )

        qs = Coupon.objects.filter(code=code)
        if self.instance is not None:
            qs = qs.exclude(id=self.instance.id)
        if qs.exists():
            raise serializers.ValidationError("Coupon code already exists")
        return code

    def validate_value(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Value must be positive")
        return value

    def validate_min_purchase(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("min_purchase cannot be negative")
        return value

    def validate_limit(self, value):
        if value is not None and value < 1:
            raise serializers.ValidationError("limit must be a positive integer")
        return value

    def validate(self, attrs):
        limit = attrs.get("limit", getattr(self.instance, "limit", None))
        used = getattr(self.instance, "used_count", 0) or 0
        if limit is not None and used > limit:
            raise serializers.ValidationError(
                {"limit": f"limit cannot be below current used_count ({used})"}
            )
        return attrs


class OfferSerializer(serializers.ModelSerializer):
    product_ids = serializers.ListField(
        child=serializers.UUIDField(),
        write_only=True,
        required=False,
    )
    products_count = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = Offer
        fields = [
            "id",
            "name",
            "description",
            "discount_type",
            "value",
            "scope",
            "is_active",
            "start_date",
            "end_date",
            "product_ids",
            "products_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "products_count", "created_at", "updated_at"]

    def get_products_count(self, obj) -> int:
        return obj.products.count()

    def validate_name(self, value):
        value = (value or "").strip()
        if len(value) < 3:
            raise serializers.ValidationError("Name must be at least 3 characters")
        return value

    def validate_value(self, value):
        if value is None or value <= 0:
            raise serializers.ValidationError("Value must be positive")
        return value

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end <= start:
            raise serializers.ValidationError(
                {"end_date": "End date must be after start date"}
            )

        scope = attrs.get("scope", getattr(self.instance, "scope", Offer.Scope.PRODUCT))
        product_ids = attrs.get("product_ids")
        if self.instance is None and scope == Offer.Scope.PRODUCT and not product_ids:
            raise serializers.ValidationError(
                {"product_ids": "Product IDs are required for PRODUCT scope offers"}
            )
        if scope == Offer.Scope.GLOBAL and product_ids:
            raise serializers.ValidationError(
                {"product_ids": "GLOBAL offers cannot be attached to products"}
            )
        return attrs

    def _attach_products(self, offer: Offer, product_ids) -> None:
        if product_ids is None:
            return
        Product.objects.filter(offer=offer).exclude(id__in=product_ids).update(offer=None)
        Product.objects.filter(id__in=product_ids).update(offer=offer)

    def create(self, validated_data):
        product_ids = validated_data.pop("product_ids", None)
        offer = super().create(validated_data)
        self._attach_products(offer, product_ids)
        return offer

    def update(self, instance, validated_data):
        product_ids = validated_data.pop("product_ids", None)
        offer = super().update(instance, validated_data)
        if offer.scope == Offer.Scope.GLOBAL:
            # A store-wide offer must not also be charged per unit.
            Product.objects.filter(offer=offer).update(offer=None)
            return offer
        self._attach_products(offer, product_ids)
        return offer
