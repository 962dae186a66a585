# promotions/admin.py

from django.contrib import admin

from promotions.models import Coupon, Offer


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "scope",
        "discount_type",
        "value",
        "is_active",
        "start_date",
        "end_date",
    )
    list_filter = ("scope", "discount_type", "is_active")
    search_fields = ("name",)


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "discount_type",
        "value",
        "min_purchase",
        "used_count",
        "limit",
        "expire_at",
        "is_active",
    )
    # Redemptions only move through checkout / cancellation.
    readonly_fields = ("used_count", "created_at", "updated_at")
    list_filter = ("discount_type", "is_active")
    search_fields = ("code",)
