# orders/admin_urls.py

"""
STAFF ORDER URLS

Mounted at /api/admin/ (see backend/urls.py):
- GET   /api/admin/orders/
- GET   /api/admin/orders/<uuid>/
- PATCH /api/admin/orders/<uuid>/status/
- POST  /api/admin/orders/<uuid>/refund/
"""

from rest_framework.routers import DefaultRouter

from orders.views import AdminOrderViewSet

router = DefaultRouter()
router.register(r"orders", AdminOrderViewSet, basename="admin-orders")

urlpatterns = router.urls
