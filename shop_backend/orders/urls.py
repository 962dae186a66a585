# orders/urls.py

"""
CUSTOMER ORDER URLS

Mounted at /api/orders/ (see backend/urls.py):
- GET/POST /api/orders/
- GET      /api/orders/<uuid>/
- POST     /api/orders/<uuid>/cancel/
- POST     /api/orders/<uuid>/payment/
- POST     /api/orders/quote/
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from orders.views import OrderViewSet
from payments.views import OrderPaymentCreateView

router = SimpleRouter()
router.register(r"", OrderViewSet, basename="orders")

urlpatterns = [
    path(
        "<uuid:order_id>/payment/",
        OrderPaymentCreateView.as_view(),
        name="order-payment-create",
    ),
    path("", include(router.urls)),
]
