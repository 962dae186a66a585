# orders/views/admin.py

"""
======================================================
PATH: orders/views/admin.py
======================================================
ADMIN ORDER VIEWSET (STAFF)

Purpose:
- Order list with basic filters, retrieve.
- Status override (PATCH /status/).
- Gateway refund for online paid orders (POST /refund/).

Security:
- Requires IsAdminUser (is_staff)
======================================================
"""

from __future__ import annotations

from datetime import datetime

from django.db.models import Q
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from orders.models import Order
from orders.serializers import AdminOrderSerializer, AdminOrderStatusSerializer
from orders.services.order_service import admin_update_status, refund_order
from orders.views.common import DOMAIN_ERRORS, domain_error_response


def _parse_date(s: str):
    try:
        return datetime.strptime(s, "%Y-%m-%d").date()
    except ValueError:
        return None


class AdminOrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = AdminOrderSerializer
    permission_classes = [IsAdminUser]

    # ======================================================
    # QUERYSET
    # ======================================================

    def get_queryset(self):
        qs = (
            Order.objects.all()
            .select_related("customer", "coupon", "global_offer")
            .prefetch_related("items", "items__product")
            .order_by("-created_at")
        )

        params = self.request.query_params

        status_val = (params.get("status") or "").strip().upper()
        if status_val:
            qs = qs.filter(status=status_val)

        payment_status = (params.get("payment_status") or "").strip().upper()
        if payment_status:
            qs = qs.filter(payment_status=payment_status)

        pm = (params.get("payment_method") or "").strip().upper()
        if pm:
            qs = qs.filter(payment_method=pm)

        q = (params.get("q") or "").strip()
        if q:
            qs = qs.filter(
                Q(order_no__icontains=q)
                | Q(payment_id__icontains=q)
                | Q(customer__username__icontains=q)
                | Q(customer__email__icontains=q)
            )

        date_from = (params.get("date_from") or "").strip()
        if date_from:
            d1 = _parse_date(date_from)
            if d1:
                qs = qs.filter(created_at__date__gte=d1)

        date_to = (params.get("date_to") or "").strip()
        if date_to:
            d2 = _parse_date(date_to)
            if d2:
                qs = qs.filter(created_at__date__lte=d2)

        return qs

    def _reload(self, order):
        return self.get_queryset().get(pk=order.pk)

    # ======================================================
    # STATUS OVERRIDE
    # PATCH /api/admin/orders/:id/status/
    # ======================================================

    @extend_schema(
        tags=["Admin Orders"],
        request=AdminOrderStatusSerializer,
        responses={
            200: AdminOrderSerializer,
            400: OpenApiResponse(description="Invalid status or transition"),
            404: OpenApiResponse(description="Order not found"),
        },
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        s = AdminOrderStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            order = admin_update_status(order_id=pk, new_status=s.validated_data["status"])
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return Response(AdminOrderSerializer(self._reload(order)).data)

    # ======================================================
    # REFUND
    # POST /api/admin/orders/:id/refund/
    # ======================================================

    @extend_schema(
        tags=["Admin Orders"],
        request=None,
        responses={
            200: AdminOrderSerializer,
            400: OpenApiResponse(description="Order is not an online paid order"),
            404: OpenApiResponse(description="Order not found"),
            502: OpenApiResponse(description="Payment provider error"),
        },
    )
    @action(detail=True, methods=["post"], url_path="refund")
    def refund(self, request, pk=None):
        try:
            order = refund_order(order_id=pk)
        except DOMAIN_ERRORS as exc:
            return domain_error_response(exc)

        return Response(AdminOrderSerializer(self._reload(order)).data)
