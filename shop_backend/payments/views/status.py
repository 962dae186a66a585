# payments/views/status.py
from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from orders.services.exceptions import OrderNotFound
from orders.services.order_service import get_customer_order
from orders.views.common import error_response
from payments.models import PaymentEvent
from payments.serializers import PaymentStatusResponseSerializer, payment_status_payload
from payments.services.reconciliation import reconcile_order_payment


class PaymentPollThrottle(UserRateThrottle):
    """
    For the payment status polling endpoint.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['public_poll'].
    """

    scope = "public_poll"


class PaymentStatusView(APIView):
    """
    Owner-only payment status poll.

    While the payment is PENDING and a gateway payment exists, the gateway
    is asked synchronously and its verdict applied before answering.
    """

    permission_classes = [IsAuthenticated]
    throttle_classes = [PaymentPollThrottle]

    @extend_schema(
        tags=["Payments"],
        responses={
            200: PaymentStatusResponseSerializer,
            404: OpenApiResponse(description="Order not found"),
        },
    )
    def get(self, request, order_id, *args, **kwargs):
        try:
            order = get_customer_order(order_id=order_id, customer=request.user)
        except OrderNotFound as exc:
            return error_response(
                code=exc.code,
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        order = reconcile_order_payment(order=order, source=PaymentEvent.Source.POLL)

        return Response(payment_status_payload(order), status=status.HTTP_200_OK)
