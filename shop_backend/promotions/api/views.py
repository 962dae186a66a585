# promotions/api/views.py

"""
STAFF OFFER + COUPON MANAGEMENT

Endpoints (mounted at /api/admin/):
- /coupons/  CRUD, filter by is_active, search by code
- /offers/   CRUD, filter by scope / is_active

Coupons that have been redeemed are deactivated instead of deleted so
order history keeps its reference.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.permissions import IsAdminUser
from rest_framework.response import Response

from promotions.api.serializers import CouponSerializer, OfferSerializer
from promotions.models import Coupon, Offer

logger = logging.getLogger(__name__)


class CouponViewSet(viewsets.ModelViewSet):
    queryset = Coupon.objects.all()
    serializer_class = CouponSerializer
    permission_classes = [IsAdminUser]
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_fields = ["is_active", "discount_type"]
    search_fields = ["code"]

    @transaction.atomic
    def destroy(self, request, *args, **kwargs):
        coupon = self.get_object()
        if coupon.orders.exists():
            coupon.is_active = False
            coupon.save(update_fields=["is_active", "updated_at"])
            logger.info("Coupon deactivated instead of deleted", extra={"code": coupon.code})
            return Response(
                {"detail": "Coupon has orders; it was deactivated instead."},
                status=status.HTTP_200_OK,
            )
        return super().destroy(request, *args, **kwargs)


class OfferViewSet(viewsets.ModelViewSet):
    queryset = Offer.objects.prefetch_related("products")
    serializer_class = OfferSerializer
    permission_classes = [IsAdminUser]
    filterset_fields = ["scope", "is_active", "discount_type"]
