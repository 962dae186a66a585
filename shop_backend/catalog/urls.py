# catalog/urls.py

"""
CATALOG URLS

Purpose:
- Register storefront catalog routes under /api/catalog/
    /api/catalog/products/
    /api/catalog/products/<uuid>/
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from catalog.views import ProductViewSet

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="catalog-products")

urlpatterns = [
    path("", include(router.urls)),
]
