# payments/urls.py
"""
PAYMENTS API URLS

Base path (mounted in backend/urls.py):
    /api/payments/

- POST /api/payments/webhooks/moyasar/
- GET  /api/payments/callback/?id=<payment_id>
- GET  /api/payments/<order_id>/status/

Payment creation lives with the order:
- POST /api/orders/<order_id>/payment/  (orders/urls.py)
"""

from __future__ import annotations

from django.urls import path

from payments.views import MoyasarCallbackView, MoyasarWebhookView, PaymentStatusView

app_name = "payments"

urlpatterns = [
    path("webhooks/moyasar/", MoyasarWebhookView.as_view(), name="moyasar-webhook"),
    path("callback/", MoyasarCallbackView.as_view(), name="moyasar-callback"),
    path("<uuid:order_id>/status/", PaymentStatusView.as_view(), name="payment-status"),
]
