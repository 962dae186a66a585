from .admin import AdminOrderViewSet
from .order import OrderViewSet

__all__ = ["AdminOrderViewSet", "OrderViewSet"]
