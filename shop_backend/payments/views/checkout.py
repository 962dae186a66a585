# payments/views/checkout.py
from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.models import Order
from orders.services.order_service import attach_payment_id, get_customer_order
from orders.views.common import DOMAIN_ERRORS, OrderWriteThrottle, domain_error_response, error_response
from payments.serializers import PaymentCreateResponseSerializer, PaymentCreateSerializer
from payments.services.moyasar import moyasar_create_payment

logger = logging.getLogger(__name__)


def _transaction_url(payment: dict):
    """3DS / hosted redirect, present while the payment is 'initiated'."""
    source = payment.get("source") or {}
    if payment.get("status") == "initiated" and source.get("transaction_url"):
        return source["transaction_url"]
    return None


class OrderPaymentCreateView(APIView):
    """
    Create the Moyasar payment for an ONLINE order and store its id once.
    """

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser]
    throttle_classes = [OrderWriteThrottle]

    @extend_schema(
        tags=["Payments"],
        request=PaymentCreateSerializer,
        responses={
            201: PaymentCreateResponseSerializer,
            400: OpenApiResponse(description="Order is not payable"),
            404: OpenApiResponse(description="Order not found"),
            409: OpenApiResponse(description="Payment already created"),
            502: OpenApiResponse(description="Payment provider error"),
        },
    )
    def post(self, request, order_id, *args, **kwargs):
        s = PaymentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = get_customer_order(order_id=order_id, customer=request.user)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        if (
            order.payment_method != Order.PaymentMethod.ONLINE
            or order.payment_status != Order.PaymentStatus.PENDING
            or order.status == Order.Status.CANCELLED
        ):
            return error_response(
                code="order_not_payable",
                message="Only pending online orders can be paid.",
                http_status=status.HTTP_400_BAD_REQUEST,
            )

        if order.payment_id:
            return error_response(
                code="payment_already_created",
                message="A payment already exists for this order.",
                http_status=status.HTTP_409_CONFLICT,
            )

        try:
            payment = moyasar_create_payment(
                amount=order.total_amount_in_smallest_unit,
                currency=order.currency,
                description=f"Order {order.order_no}",
                source=data["source"],
                callback_url=data.get("callback_url") or "",
                metadata={"order_id": str(order.id), "order_no": order.order_no},
            )
        except DOMAIN_ERRORS as exc:
            logger.warning(
                "Payment creation failed",
                extra={"order_id": str(order.id), "error": str(exc)},
            )
            return domain_error_response(exc)

        payment_id = str(payment.get("id") or "").strip()
        if not payment_id:
            return error_response(
                code="payment_gateway_error",
                message="Payment provider returned no payment id.",
                http_status=status.HTTP_502_BAD_GATEWAY,
            )

        if not attach_payment_id(order_id=order.id, payment_id=payment_id):
            return error_response(
                code="payment_already_created",
                message="A payment already exists for this order.",
                http_status=status.HTTP_409_CONFLICT,
            )

        return Response(
            {
                "order_id": str(order.id),
                "payment_id": payment_id,
                "status": str(payment.get("status") or ""),
                "transaction_url": _transaction_url(payment),
            },
            status=status.HTTP_201_CREATED,
        )
