# payments/views/callback.py
from __future__ import annotations

import logging
from urllib.parse import urlencode, urlparse

from django.conf import settings
from django.shortcuts import redirect
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from orders.models import Order
from payments.models import PaymentEvent
from payments.services.reconciliation import reconcile_order_payment

logger = logging.getLogger(__name__)


def _safe_frontend_base() -> str:
    base = (getattr(settings, "FRONTEND_BASE_URL", "") or "").strip()
    if not base:
        base = "http://localhost:5173"

    parsed = urlparse(base)
    if not parsed.scheme or not parsed.netloc:
        logger.warning("Invalid FRONTEND_BASE_URL detected")
        return "http://localhost:5173"

    return base.rstrip("/")


class MoyasarCallbackView(APIView):
    """
    Browser redirect target after the hosted payment / 3DS step.

    The query string is never trusted: the order is verified against the
    gateway before the customer is redirected to the storefront.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request, *args, **kwargs):
        payment_id = (request.query_params.get("id") or "").strip()
        frontend_base = _safe_frontend_base()

        if not payment_id:
            logger.warning("Callback without payment id")
            return redirect(frontend_base + "/orders")

        order = Order.objects.filter(payment_id=payment_id).first()
        if order is None:
            logger.warning("Callback unknown payment id", extra={"payment_id": payment_id})
            return redirect(frontend_base + "/orders")

        order = reconcile_order_payment(order=order, source=PaymentEvent.Source.CALLBACK)

        logger.info(
            "Callback redirecting to frontend",
            extra={"payment_id": payment_id, "payment_status": order.payment_status},
        )
        query = urlencode({"status": order.payment_status.lower()})
        return redirect(f"{frontend_base}/orders/{order.id}?{query}")
