# orders/views/order.py

"""
======================================================
PATH: orders/views/order.py
======================================================
CUSTOMER ORDER VIEWSET

Purpose:
- Place orders (COD or ONLINE), list + retrieve own orders.
- Cancel own PENDING orders.
- Quote a cart without placing it.

Rules:
- Customers only ever see their own orders.
- Totals come from the pricing resolver; request amounts are ignored.
======================================================
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import (
    OnlineOrderCreatedSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
    QuoteInputSerializer,
    pricing_payload,
)
from orders.services.order_service import cancel_order, place_order
from orders.services.pricing import resolve_order_pricing
from orders.views.common import DOMAIN_ERRORS, OrderWriteThrottle, domain_error_response


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = OrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return (
            Order.objects.filter(customer=self.request.user)
            .select_related("coupon", "global_offer")
            .prefetch_related("items", "items__product")
            .order_by("-created_at")
        )

    def get_throttles(self):
        if self.action in {"create", "cancel"}:
            return [OrderWriteThrottle()]
        return super().get_throttles()

    # --------------------------------------------------
    # PLACE ORDER
    # --------------------------------------------------

    @extend_schema(
        tags=["Orders"],
        request=PlaceOrderSerializer,
        responses={
            201: OrderSerializer,
            400: OpenApiResponse(description="Validation, product or coupon error"),
        },
        description=(
            "Place an order. COD orders are created CONFIRMED; ONLINE orders "
            "are created PENDING and return the gateway amount."
        ),
    )
    def create(self, request, *args, **kwargs):
        s = PlaceOrderSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            order = place_order(
                customer=request.user,
                items=data["items"],
                payment_method=data["payment_method"],
                address=data.get("address_id"),
                new_address=data.get("new_address"),
                coupon_code=data.get("coupon_code"),
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        if order.payment_method == Order.PaymentMethod.ONLINE:
            payload = OnlineOrderCreatedSerializer(order).data
        else:
            payload = OrderSerializer(self._reload(order)).data

        return Response(payload, status=status.HTTP_201_CREATED)

    def _reload(self, order):
        return self.get_queryset().get(pk=order.pk)

    # --------------------------------------------------
    # CANCEL
    # --------------------------------------------------

    @extend_schema(
        tags=["Orders"],
        request=None,
        responses={
            200: OrderSerializer,
            400: OpenApiResponse(description="Order is not cancellable"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    @action(detail=True, methods=["post"], url_path="cancel")
    def cancel(self, request, pk=None):
        try:
            order = cancel_order(order_id=pk, requester=request.user)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return Response(OrderSerializer(self._reload(order)).data)

    # --------------------------------------------------
    # QUOTE (NO WRITES)
    # --------------------------------------------------

    @extend_schema(
        tags=["Orders"],
        request=QuoteInputSerializer,
        responses={
            200: OpenApiResponse(description="Priced cart"),
            400: OpenApiResponse(description="Validation, product or coupon error"),
        },
        description="Price a cart with the current offers and coupon without placing it.",
    )
    @action(detail=False, methods=["post"], url_path="quote")
    def quote(self, request):
        s = QuoteInputSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = resolve_order_pricing(
                items=data["items"],
                coupon_code=data.get("coupon_code"),
                payment_method=data["payment_method"],
            )
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return Response(pricing_payload(result))
