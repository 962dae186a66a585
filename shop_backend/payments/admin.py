# payments/admin.py

from django.contrib import admin

from payments.models import PaymentEvent


@admin.register(PaymentEvent)
class PaymentEventAdmin(admin.ModelAdmin):
    list_display = (
        "created_at",
        "source",
        "event_type",
        "payment_id",
        "order",
        "outcome",
    )
    readonly_fields = (
        "source",
        "event_type",
        "payment_id",
        "order",
        "outcome",
        "error",
        "payload",
        "created_at",
        "processed_at",
    )
    search_fields = ("payment_id", "order__order_no")
    list_filter = ("source", "outcome", "created_at")
