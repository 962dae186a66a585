# payments/views/webhook.py
from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import JSONParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from orders.views.common import error_response
from payments.serializers import WebhookAckSerializer
from payments.services.exceptions import SignatureInvalid
from payments.services.reconciliation import handle_webhook

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-moyasar-signature"


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class MoyasarWebhookView(APIView):
    """
    Moyasar event receiver.

    401 on a bad signature; otherwise always 200, whatever happened while
    applying the event (failures are journaled on PaymentEvent).
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [JSONParser]
    throttle_classes = [WebhookThrottle]

    @extend_schema(
        tags=["Payments"],
        request=None,
        responses={
            200: WebhookAckSerializer,
            401: OpenApiResponse(description="Invalid signature"),
        },
    )
    def post(self, request, *args, **kwargs):
        # request.data is never touched: the HMAC is over the body exactly
        # as sent, and it is only decoded once the signature checks out.
        raw_body = getattr(request, "body", b"") or b""
        signature = request.headers.get(SIGNATURE_HEADER)

        try:
            handle_webhook(
                raw_body=raw_body,
                signature=signature,
            )
        except SignatureInvalid as exc:
            return error_response(
                code=exc.code,
                message=str(exc),
                http_status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response({"received": True}, status=status.HTTP_200_OK)
