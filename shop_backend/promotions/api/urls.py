# promotions/api/urls.py

"""
STAFF PROMOTIONS URLS

Mounted at /api/admin/ (see backend/urls.py):
- /api/admin/coupons/
- /api/admin/offers/
"""

from rest_framework.routers import DefaultRouter

from promotions.api.views import CouponViewSet, OfferViewSet

router = DefaultRouter()
router.register(r"coupons", CouponViewSet, basename="admin-coupons")
router.register(r"offers", OfferViewSet, basename="admin-offers")

urlpatterns = router.urls
