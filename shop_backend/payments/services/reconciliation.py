# payments/services/reconciliation.py

"""
PAYMENT RECONCILIATION (APPLICATION SERVICE)

Two entry points, one state machine:
- handle_webhook(): signed gateway events
- reconcile_order_payment(): poll / callback verification against the gateway

Hard rules:
- Both paths only change orders through order_service.mark_paid /
  mark_failed / mark_refunded (compare-and-swap, idempotent).
- Every attempt is journaled as a PaymentEvent; failures are stored on it
  and retried later (next poll, next delivery, retry_payment_events).
- A gateway transport error never marks a payment FAILED; only an explicit
  gateway status does.
- A webhook processing error is never raised back to the gateway.
"""

from __future__ import annotations

import json
import logging

from django.utils import timezone

from orders.models import Order
from orders.services.order_service import mark_failed, mark_paid, mark_refunded
from payments.models import PaymentEvent
from payments.services.exceptions import (
    PaymentGatewayError,
    PaymentVerificationFailed,
    SignatureInvalid,
)
from payments.services.moyasar import (
    moyasar_verify_payment,
    verify_moyasar_signature,
    webhook_verification_skipped,
)

logger = logging.getLogger(__name__)

PAID_EVENTS = {"payment_paid"}
FAILED_EVENTS = {"payment_failed", "payment_voided"}
REFUNDED_EVENTS = {"payment_refunded"}
INFORMATIONAL_EVENTS = {"payment_authorized", "payment_captured", "payment_verified"}

GATEWAY_FAILED_STATUSES = {"failed", "voided"}


# ============================================================
# JOURNAL HELPERS
# ============================================================


def _finish(event: PaymentEvent, outcome: str, *, error: str = "") -> PaymentEvent:
    event.outcome = outcome
    event.error = error
    event.processed_at = timezone.now()
    event.save(update_fields=["outcome", "error", "processed_at", "payload"])
    return event


def _outcome_for(changed: bool) -> str:
    if changed:
        return PaymentEvent.Outcome.PROCESSED
    return PaymentEvent.Outcome.IGNORED


def _check_webhook_amount(order: Order, data: dict) -> None:
    """
    Compare amount/currency carried by the event with the order snapshot,
    when the event carries them.
    """
    amount = data.get("amount")
    if amount is not None and order.total_amount_in_smallest_unit is not None:
        try:
            amount_int = int(amount)
        except (TypeError, ValueError):
            amount_int = None
        if amount_int != order.total_amount_in_smallest_unit:
            raise PaymentVerificationFailed(
                f"Amount mismatch: expected {order.total_amount_in_smallest_unit}, got {amount}"
            )

    currency = data.get("currency")
    if currency and str(currency).lower() != (order.currency or "").lower():
        raise PaymentVerificationFailed(
            f"Currency mismatch: expected {order.currency}, got {currency}"
        )


# ============================================================
# WEBHOOK PATH
# ============================================================


def _dispatch_webhook(event_type: str, data: dict, order: Order | None) -> str:
    if event_type in INFORMATIONAL_EVENTS:
        logger.info("Webhook informational event, no action", extra={"event_type": event_type})
        return PaymentEvent.Outcome.IGNORED

    if event_type not in PAID_EVENTS | FAILED_EVENTS | REFUNDED_EVENTS:
        logger.info("Webhook unknown event type", extra={"event_type": event_type})
        return PaymentEvent.Outcome.IGNORED

    if order is None:
        logger.info(
            "Webhook: no order for payment",
            extra={"event_type": event_type, "payment_id": data.get("id")},
        )
        return PaymentEvent.Outcome.IGNORED

    if event_type in PAID_EVENTS:
        _check_webhook_amount(order, data)
        return _outcome_for(mark_paid(order.id))

    if event_type in FAILED_EVENTS:
        return _outcome_for(mark_failed(order.id))

    return _outcome_for(mark_refunded(order.id))


def _parse_body(raw_body: bytes):
    """Decode the signed body; returns (payload, error)."""
    try:
        payload = json.loads((raw_body or b"").decode("utf-8") or "{}")
    except (UnicodeDecodeError, ValueError) as exc:
        return {}, f"Invalid JSON body: {exc}"
    if not isinstance(payload, dict):
        return {}, "Webhook body must be a JSON object"
    return payload, ""


def handle_webhook(
    *, raw_body: bytes, signature: str | None, payload=None
) -> PaymentEvent:
    """
    Verify, journal and apply one gateway event.

    Raises SignatureInvalid (before anything is recorded) on a bad
    signature. Any other failure is logged and stored on the event.
    The body is only parsed once its signature checks out; an
    already-decoded payload may be passed instead.
    """
    if webhook_verification_skipped():
        logger.warning("Moyasar webhook signature verification is DISABLED")
    elif not verify_moyasar_signature(raw_body=raw_body, signature=signature):
        logger.warning("Webhook rejected: invalid signature")
        raise SignatureInvalid("Invalid signature")

    parse_error = ""
    if payload is None:
        payload, parse_error = _parse_body(raw_body)

    payload = payload if isinstance(payload, dict) else {}
    event_type = str(payload.get("type") or "").strip()
    data = payload.get("data") if isinstance(payload.get("data"), dict) else {}
    payment_id = str(data.get("id") or "").strip()

    order = Order.objects.filter(payment_id=payment_id).first() if payment_id else None

    event = PaymentEvent.objects.create(
        source=PaymentEvent.Source.WEBHOOK,
        event_type=event_type,
        payment_id=payment_id,
        order=order,
        payload=payload,
    )

    logger.info(
        "Webhook received",
        extra={"event_type": event_type, "payment_id": payment_id, "event_id": str(event.id)},
    )

    if parse_error:
        logger.warning("Webhook body could not be decoded", extra={"event_id": str(event.id)})
        return _finish(event, PaymentEvent.Outcome.FAILED, error=parse_error)

    try:
        outcome = _dispatch_webhook(event_type, data, order)
    except Exception as exc:
        # Acknowledged to the gateway regardless; keep the failure for retry.
        logger.exception(
            "Webhook processing error",
            extra={"event_type": event_type, "payment_id": payment_id},
        )
        return _finish(event, PaymentEvent.Outcome.FAILED, error=str(exc))

    return _finish(event, outcome)


# ============================================================
# POLL / CALLBACK PATH
# ============================================================


def reconcile_order_payment(*, order: Order, source: str = PaymentEvent.Source.POLL) -> Order:
    """
    Ask the gateway about a PENDING order and apply the verdict.

    verified             -> mark_paid
    status failed/voided -> mark_failed
    paid but mismatched  -> FAILED event, order stays PENDING
    any other status     -> order stays PENDING
    gateway error        -> FAILED event, order stays PENDING
    """
    if order.payment_status != Order.PaymentStatus.PENDING or not order.payment_id:
        return order

    event = PaymentEvent.objects.create(
        source=source,
        event_type="verify",
        payment_id=order.payment_id,
        order=order,
    )

    try:
        result = moyasar_verify_payment(
            order.payment_id,
            order.total_amount_in_smallest_unit,
            order.currency,
        )
    except PaymentGatewayError as exc:
        logger.warning(
            "Payment verification deferred (gateway error)",
            extra={"order_id": str(order.id), "payment_id": order.payment_id},
        )
        _finish(event, PaymentEvent.Outcome.FAILED, error=str(exc))
        order.refresh_from_db()
        return order

    event.payload = result.payment or {}

    if result.verified:
        _finish(event, _outcome_for(mark_paid(order.id)))
    elif result.mismatch:
        error = PaymentVerificationFailed(result.error)
        logger.error(
            "Payment verification failed",
            extra={"order_id": str(order.id), "payment_id": order.payment_id, "error": result.error},
        )
        _finish(event, PaymentEvent.Outcome.FAILED, error=str(error))
    elif result.status in GATEWAY_FAILED_STATUSES:
        _finish(event, _outcome_for(mark_failed(order.id)))
    else:
        _finish(event, PaymentEvent.Outcome.IGNORED, error=result.error)

    order.refresh_from_db()
    return order


def retry_failed_events(*, limit: int | None = None) -> dict:
    """
    Re-run verification for PENDING online orders whose latest
    reconciliation attempt failed.
    """
    candidates = (
        Order.objects.filter(
            payment_method=Order.PaymentMethod.ONLINE,
            payment_status=Order.PaymentStatus.PENDING,
            payment_events__outcome=PaymentEvent.Outcome.FAILED,
        )
        .exclude(payment_id__isnull=True)
        .distinct()
    )

    summary = {"checked": 0, "paid": 0, "failed": 0, "pending": 0}

    for order in candidates:
        latest = order.payment_events.order_by("-created_at").first()
        if latest is None or latest.outcome != PaymentEvent.Outcome.FAILED:
            continue

        if limit is not None and summary["checked"] >= limit:
            break

        summary["checked"] += 1
        order = reconcile_order_payment(order=order, source=PaymentEvent.Source.POLL)

        if order.payment_status == Order.PaymentStatus.PAID:
            summary["paid"] += 1
        elif order.payment_status == Order.PaymentStatus.FAILED:
            summary["failed"] += 1
        else:
            summary["pending"] += 1

    logger.info("Payment event retry finished", extra=summary)
    return summary
