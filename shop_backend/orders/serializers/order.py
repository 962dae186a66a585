# orders/serializers/order.py

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only snapshot).
    """

    product_name = serializers.SerializerMethodField()
    sku = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "sku",
            "quantity",
            "unit_price",
            "total_price",
            "selected_modifiers",
        ]
        read_only_fields = fields

    def get_product_name(self, obj):
        p = getattr(obj, "product", None)
        return getattr(p, "name", None) or "Item"

    def get_sku(self, obj):
        p = getattr(obj, "product", None)
        return getattr(p, "sku", None)


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    coupon_code = serializers.SerializerMethodField()
    global_offer_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "status",
            "payment_status",
            "payment_method",
            "subtotal_amount",
            "discount_amount",
            "total_amount",
            "total_amount_in_smallest_unit",
            "currency",
            "coupon_code",
            "global_offer_name",
            "payment_id",
            "shipping_address",
            "paid_at",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields

    def get_coupon_code(self, obj):
        coupon = getattr(obj, "coupon", None)
        return coupon.code if coupon else None

    def get_global_offer_name(self, obj):
        offer = getattr(obj, "global_offer", None)
        return offer.name if offer else None


class OnlineOrderCreatedSerializer(serializers.ModelSerializer):
    """
    Minimal payload returned for ONLINE orders: enough for the client to
    open the gateway payment form.
    """

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "total_amount",
            "total_amount_in_smallest_unit",
            "currency",
        ]
        read_only_fields = fields


class AdminOrderSerializer(OrderSerializer):
    customer_id = serializers.IntegerField(source="customer.id", read_only=True)
    customer_username = serializers.CharField(source="customer.username", read_only=True)
    customer_email = serializers.CharField(source="customer.email", read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + [
            "customer_id",
            "customer_username",
            "customer_email",
        ]
        read_only_fields = fields
