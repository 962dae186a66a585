# orders/services/exceptions.py

"""
ORDER SERVICE ERRORS

Centralized domain errors for pricing and the order lifecycle.

Every error carries a stable `code` and the HTTP status the API layer
should answer with. Coupon errors live in promotions.services.exceptions.
"""


class OrderServiceError(Exception):
    """Base exception for all order service failures."""

    code = "order_error"
    http_status = 400


class PricingError(OrderServiceError):
    """Raised when an order cannot be priced."""

    code = "pricing_error"


class ProductUnavailable(PricingError):
    """Raised when a requested product is missing or inactive."""

    code = "product_unavailable"


class AddressRequired(OrderServiceError):
    """Raised when neither a saved nor a new address resolves."""

    code = "address_required"


class OrderNotFound(OrderServiceError):
    """Raised when the order is missing or not owned by the requester."""

    code = "order_not_found"
    http_status = 404


class InvalidTransition(OrderServiceError):
    """Raised when a status change is not allowed from the current state."""

    code = "invalid_transition"


class RefundNotAllowed(OrderServiceError):
    """Raised when an order is not an online, paid order."""

    code = "refund_not_allowed"
