from .checkout import (
    AdminOrderStatusSerializer,
    NewAddressSerializer,
    OrderItemInputSerializer,
    PlaceOrderSerializer,
    QuoteInputSerializer,
    pricing_payload,
)
from .order import (
    AdminOrderSerializer,
    OnlineOrderCreatedSerializer,
    OrderItemSerializer,
    OrderSerializer,
)

__all__ = [
    "AdminOrderSerializer",
    "AdminOrderStatusSerializer",
    "NewAddressSerializer",
    "OnlineOrderCreatedSerializer",
    "OrderItemInputSerializer",
    "OrderItemSerializer",
    "OrderSerializer",
    "PlaceOrderSerializer",
    "QuoteInputSerializer",
    "pricing_payload",
]
