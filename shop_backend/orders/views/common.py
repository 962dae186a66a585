# orders/views/common.py

from rest_framework import status
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle

from orders.services.exceptions import OrderServiceError
from payments.services.exceptions import PaymentServiceError
from promotions.services.exceptions import PromotionError

DOMAIN_ERRORS = (OrderServiceError, PromotionError, PaymentServiceError)


# ======================================================
# API ERROR NORMALIZATION
# ======================================================

def error_response(*, code: str, message: str, http_status: int):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


def domain_error_response(exc):
    return error_response(
        code=getattr(exc, "code", "error"),
        message=str(exc),
        http_status=getattr(exc, "http_status", status.HTTP_400_BAD_REQUEST),
    )


# ======================================================
# THROTTLES
# ======================================================

class OrderWriteThrottle(UserRateThrottle):
    """
    Order placement / cancellation / payment creation.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['order_write'].
    """

    scope = "order_write"
