# orders/admin.py

from django.contrib import admin

from orders.models import Address, Order, OrderItem


# ======================================================
# ORDER ADMIN
# ======================================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "quantity",
        "unit_price",
        "total_price",
        "selected_modifiers",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Money, items and payment fields are snapshots; status changes go
    through the API so coupon slots stay consistent.
    """

    list_display = (
        "order_no",
        "customer",
        "status",
        "payment_status",
        "payment_method",
        "total_amount",
        "created_at",
    )
    readonly_fields = (
        "order_no",
        "customer",
        "status",
        "payment_status",
        "payment_method",
        "subtotal_amount",
        "discount_amount",
        "total_amount",
        "total_amount_in_smallest_unit",
        "currency",
        "coupon",
        "global_offer",
        "payment_id",
        "shipping_address",
        "paid_at",
        "created_at",
        "updated_at",
    )
    search_fields = ("order_no", "payment_id", "customer__username", "customer__email")
    list_filter = ("status", "payment_status", "payment_method", "created_at")
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# ADDRESS ADMIN
# ======================================================


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("full_name", "user", "city", "country", "created_at")
    search_fields = ("full_name", "phone", "city", "user__username")
