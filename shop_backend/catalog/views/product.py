# catalog/views/product.py

"""
PRODUCT VIEWSET (STOREFRONT)

Purpose:
- Public product browsing endpoint for the online store (AllowAny).
- Read-only; returns ONLY active products.
- Each product carries offer-adjusted pricing (see ProductSerializer).
"""

from django.db.models import Q
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import viewsets
from rest_framework.permissions import AllowAny
from rest_framework.throttling import AnonRateThrottle

from catalog.serializers import ProductSerializer
from catalog.services.catalog import product_snapshot_queryset


class PublicCatalogThrottle(AnonRateThrottle):
    scope = "public_catalog"


class ProductViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /api/catalog/products/?q=<search>
    GET /api/catalog/products/<uuid>/
    """

    serializer_class = ProductSerializer
    permission_classes = [AllowAny]
    throttle_classes = [PublicCatalogThrottle]

    def get_queryset(self):
        qs = product_snapshot_queryset().filter(is_active=True)

        q = (self.request.query_params.get("q") or "").strip()
        if q:
            qs = qs.filter(Q(name__icontains=q) | Q(sku__icontains=q))

        return qs.order_by("name")

    @extend_schema(
        parameters=[
            OpenApiParameter(name="q", required=False, type=str),
        ],
        tags=["Catalog"],
    )
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)
