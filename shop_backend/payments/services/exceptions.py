# payments/services/exceptions.py

"""
PAYMENT SERVICE ERRORS

Centralized domain errors for gateway calls and reconciliation.
"""


class PaymentServiceError(Exception):
    """Base exception for all payment service failures."""

    code = "payment_error"
    http_status = 400


class PaymentGatewayError(PaymentServiceError):
    """
    Raised on network errors, timeouts and gateway HTTP errors.

    Always transient: it never decides that a payment failed.
    """

    code = "payment_gateway_error"
    http_status = 502


class PaymentVerificationFailed(PaymentServiceError):
    """Raised when the gateway amount or currency disagrees with the order."""

    code = "payment_verification_failed"


class SignatureInvalid(PaymentServiceError):
    """Raised when a webhook signature is missing or does not match."""

    code = "signature_invalid"
    http_status = 401
