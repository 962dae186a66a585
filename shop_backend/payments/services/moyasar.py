# payments/services/moyasar.py
from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.exceptions import PaymentGatewayError

logger = logging.getLogger(__name__)

MOYASAR_BASE = "https://api.moyasar.com/v1"

SUBUNIT_MULTIPLIERS = {
    "KWD": 1000,
    "BHD": 1000,
    "OMR": 1000,
    "JPY": 1,
}
DEFAULT_MULTIPLIER = 100


def _moyasar_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("MOYASAR") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _get_secret_key() -> str:
    sk = (_moyasar_cfg().get("SECRET_KEY") or "").strip()
    if not sk:
        raise PaymentGatewayError(
            "MOYASAR SECRET_KEY is not configured. "
            "Expected settings.PAYMENTS['MOYASAR']['SECRET_KEY']."
        )
    return sk


def _timeout() -> float:
    return float(_moyasar_cfg().get("TIMEOUT_SECONDS") or 10)


def default_currency() -> str:
    return (_moyasar_cfg().get("CURRENCY") or "SAR").upper()


def webhook_verification_skipped() -> bool:
    return bool(_moyasar_cfg().get("SKIP_WEBHOOK_VERIFICATION", False))


def to_smallest_unit(amount, currency: str = "SAR") -> int:
    """
    Major-unit amount -> integer gateway amount (half-up).

    KWD/BHD/OMR use 1000 subunits, JPY none, everything else 100.
    """
    try:
        major = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc

    multiplier = SUBUNIT_MULTIPLIERS.get((currency or "").upper(), DEFAULT_MULTIPLIER)
    minor = (major * multiplier).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(minor)


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _parse_json(raw: str) -> dict | None:
    try:
        parsed = json.loads(raw or "")
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _request_json(method: str, path: str, *, body: dict | None = None) -> dict[str, Any]:
    sk = _get_secret_key()
    token = base64.b64encode(f"{sk}:".encode("utf-8")).decode("ascii")

    data = None
    if body is not None:
        data = json.dumps(body, ensure_ascii=False).encode("utf-8")

    req = Request(
        f"{MOYASAR_BASE}{path}",
        data=data,
        headers={
            "Authorization": f"Basic {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        },
        method=method,
    )

    try:
        with urlopen(req, timeout=_timeout()) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace")
        except OSError:
            raw = ""
        parsed = _parse_json(raw) or {}
        msg = parsed.get("message") or _safe_preview(raw) or "Moyasar rejected request"
        logger.warning(
            "Moyasar HTTP error",
            extra={"path": path, "status_code": e.code, "gateway_message": msg},
        )
        raise PaymentGatewayError(f"Moyasar HTTPError: {e.code} {msg}") from e
    except URLError as e:
        raise PaymentGatewayError(f"Moyasar URLError: {e}") from e
    except (TimeoutError, OSError) as e:
        raise PaymentGatewayError(f"Moyasar request failed: {e}") from e

    parsed = _parse_json(raw)
    if parsed is None:
        raise PaymentGatewayError(f"Moyasar returned non-JSON: {_safe_preview(raw)}")
    return parsed


# ============================================================
# GATEWAY OPERATIONS
# ============================================================


def moyasar_create_payment(
    *,
    amount: int,
    currency: str,
    description: str,
    source: dict,
    callback_url: str = "",
    metadata: dict | None = None,
) -> dict:
    payload: dict = {
        "amount": int(amount),
        "currency": (currency or default_currency()).upper(),
        "description": str(description).strip(),
        "source": source,
    }

    callback_url = callback_url or (_moyasar_cfg().get("CALLBACK_URL") or "")
    if callback_url:
        payload["callback_url"] = str(callback_url).strip()

    if metadata:
        payload["metadata"] = metadata

    return _request_json("POST", "/payments", body=payload)


def moyasar_get_payment(payment_id: str) -> dict:
    pid = str(payment_id or "").strip()
    if not pid:
        raise PaymentGatewayError("payment_id is required")
    return _request_json("GET", f"/payments/{quote(pid, safe='')}")


def moyasar_refund_payment(payment_id: str, *, amount: int | None = None) -> dict:
    pid = str(payment_id or "").strip()
    if not pid:
        raise PaymentGatewayError("payment_id is required")

    body = {"amount": int(amount)} if amount else {}
    return _request_json("POST", f"/payments/{quote(pid, safe='')}/refund", body=body)


@dataclass
class PaymentVerification:
    verified: bool
    status: str = ""
    error: str = ""
    payment: dict = field(default_factory=dict)

    @property
    def mismatch(self) -> bool:
        """Gateway says paid, but not for the amount/currency we expect."""
        return not self.verified and self.status == "paid"


def moyasar_verify_payment(
    payment_id: str,
    expected_amount: int,
    expected_currency: str = "SAR",
) -> PaymentVerification:
    """
    Fetch the payment and check status, amount and currency.

    PaymentGatewayError propagates: a transport failure is not a verdict.
    """
    payment = moyasar_get_payment(payment_id)
    status = str(payment.get("status") or "").strip().lower()

    if status != "paid":
        return PaymentVerification(
            verified=False,
            status=status,
            error=f"Payment status is {status or 'unknown'}, expected paid",
            payment=payment,
        )

    amount = payment.get("amount")
    try:
        amount_int = int(amount) if amount is not None else None
    except (TypeError, ValueError):
        amount_int = None

    if amount_int != expected_amount:
        return PaymentVerification(
            verified=False,
            status=status,
            error=f"Amount mismatch: expected {expected_amount}, got {amount}",
            payment=payment,
        )

    currency = str(payment.get("currency") or "")
    if currency.lower() != str(expected_currency or "").lower():
        return PaymentVerification(
            verified=False,
            status=status,
            error=f"Currency mismatch: expected {expected_currency}, got {currency}",
            payment=payment,
        )

    return PaymentVerification(verified=True, status=status, payment=payment)


def verify_moyasar_signature(*, raw_body: bytes, signature: str | None) -> bool:
    """
    HMAC-SHA256 of the raw body with the webhook secret, hex encoded,
    compared in constant time. A missing secret never verifies.
    """
    secret = (_moyasar_cfg().get("WEBHOOK_SECRET") or "").strip()
    if not secret or not signature:
        return False

    computed = hmac.new(secret.encode("utf-8"), raw_body or b"", hashlib.sha256).hexdigest()
    provided = str(signature).strip().encode("utf-8", "surrogateescape")
    return hmac.compare_digest(computed.encode("ascii"), provided)
