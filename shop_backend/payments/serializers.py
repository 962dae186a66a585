# payments/serializers.py

"""
PAYMENTS SERIALIZERS

Transport-layer contracts for the payment endpoints. They validate
request/response shapes, not business rules.
"""

from __future__ import annotations

from rest_framework import serializers


class PaymentCreateSerializer(serializers.Serializer):
    """
    Gateway payment source as produced by the Moyasar payment form
    (e.g. {"type": "token", "token": "..."} or {"type": "applepay", ...}).
    """

    source = serializers.DictField()
    callback_url = serializers.URLField(required=False, allow_blank=True)

    def validate_source(self, value):
        source_type = str(value.get("type") or "").strip()
        if not source_type:
            raise serializers.ValidationError("source.type is required")
        return value


class PaymentCreateResponseSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    payment_id = serializers.CharField()
    status = serializers.CharField()
    transaction_url = serializers.CharField(allow_null=True)


class PaymentStatusResponseSerializer(serializers.Serializer):
    order_id = serializers.UUIDField()
    order_no = serializers.CharField()
    status = serializers.CharField()
    payment_status = serializers.CharField()
    payment_method = serializers.CharField()
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_amount_in_smallest_unit = serializers.IntegerField(allow_null=True)
    currency = serializers.CharField()
    paid_at = serializers.DateTimeField(allow_null=True)


class WebhookAckSerializer(serializers.Serializer):
    received = serializers.BooleanField()


def payment_status_payload(order) -> dict:
    return {
        "order_id": order.id,
        "order_no": order.order_no,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "total_amount": order.total_amount,
        "total_amount_in_smallest_unit": order.total_amount_in_smallest_unit,
        "currency": order.currency,
        "paid_at": order.paid_at,
    }
