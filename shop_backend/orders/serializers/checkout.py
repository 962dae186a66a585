# orders/serializers/checkout.py

"""
ORDER INPUT SERIALIZERS

Shape validation only. Prices, offers and coupon rules are decided by
orders.services.pricing; nothing here trusts client-side amounts.
"""

from rest_framework import serializers

from orders.models import Order
from promotions.services.discounts import round_money


class ModifierSelectionSerializer(serializers.Serializer):
    # Unknown ids are tolerated and skipped during pricing.
    modifier_id = serializers.CharField(max_length=64)
    option_id = serializers.CharField(max_length=64)


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, max_value=999)
    modifiers = ModifierSelectionSerializer(many=True, required=False, default=list)


class NewAddressSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=60, required=False, allow_blank=True, default="")
    full_name = serializers.CharField(max_length=120)
    phone = serializers.CharField(max_length=40)
    line1 = serializers.CharField(max_length=255)
    line2 = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    city = serializers.CharField(max_length=120)
    region = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    postal_code = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    country = serializers.CharField(max_length=2, required=False, default="SA")


class QuoteInputSerializer(serializers.Serializer):
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    coupon_code = serializers.CharField(
        max_length=20, required=False, allow_blank=True, allow_null=True
    )
    payment_method = serializers.ChoiceField(
        choices=Order.PaymentMethod.choices,
        required=False,
        default=Order.PaymentMethod.ONLINE,
    )

    def validate_coupon_code(self, value):
        value = (value or "").strip()
        return value.upper() or None


class PlaceOrderSerializer(QuoteInputSerializer):
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    address_id = serializers.UUIDField(required=False, allow_null=True)
    new_address = NewAddressSerializer(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs.get("address_id") and not attrs.get("new_address"):
            raise serializers.ValidationError(
                {"address_id": "Provide address_id or new_address."}
            )
        return attrs


class AdminOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.Status.choices)


def _money_str(value) -> str:
    return f"{round_money(value):.2f}"


def pricing_payload(result) -> dict:
    """
    Public view of a PricingResult (amounts rounded for display).
    """
    return {
        "items": [
            {
                "product_id": str(line.product.id),
                "name": line.product.name,
                "quantity": line.quantity,
                "unit_price": _money_str(line.unit_price),
                "item_total": _money_str(line.item_total),
                "selected_modifiers": line.selected_modifiers,
            }
            for line in result.lines
        ],
        "total_amount": _money_str(result.total_amount),
        "global_discount": _money_str(result.global_discount),
        "coupon_discount": _money_str(result.coupon_discount),
        "discount_amount": _money_str(result.discount_amount),
        "final_total": _money_str(result.final_total),
        "currency": result.currency,
        "amount_in_smallest_unit": result.amount_in_smallest_unit,
        "coupon_code": result.coupon.code if result.coupon else None,
        "global_offer_name": result.global_offer.name if result.global_offer else None,
    }
