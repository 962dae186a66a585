import base64
import hashlib
import hmac
import io
from decimal import Decimal
from unittest import mock
from urllib.error import HTTPError, URLError

from django.test import SimpleTestCase, override_settings

from payments.services.exceptions import PaymentGatewayError
from payments.services.moyasar import (
    moyasar_create_payment,
    moyasar_get_payment,
    moyasar_verify_payment,
    to_smallest_unit,
    verify_moyasar_signature,
)

MOYASAR_SETTINGS = {
    "MOYASAR": {
        "SECRET_KEY": "sk_test_123",
        "WEBHOOK_SECRET": "whsec_test",
        "CURRENCY": "SAR",
        "CALLBACK_URL": "https://shop.example.com/api/payments/callback/",
        "TIMEOUT_SECONDS": 5,
    }
}


def _fake_response(body: bytes):
    response = mock.MagicMock()
    response.read.return_value = body
    response.__enter__.return_value = response
    return response


class SmallestUnitTests(SimpleTestCase):
    def test_two_decimal_currencies(self):
        self.assertEqual(to_smallest_unit(Decimal("81.00"), "SAR"), 8100)
        self.assertEqual(to_smallest_unit(Decimal("25.4745"), "sar"), 2547)
        self.assertEqual(to_smallest_unit(Decimal("0.005"), "USD"), 1)

    def test_three_decimal_and_zero_decimal_currencies(self):
        self.assertEqual(to_smallest_unit(Decimal("1.2345"), "KWD"), 1235)
        self.assertEqual(to_smallest_unit(Decimal("12.5"), "BHD"), 12500)
        self.assertEqual(to_smallest_unit(Decimal("500.4"), "JPY"), 500)

    def test_rejects_garbage(self):
        with self.assertRaises(ValueError):
            to_smallest_unit("ten", "SAR")


@override_settings(PAYMENTS=MOYASAR_SETTINGS)
class SignatureTests(SimpleTestCase):
    body = b'{"type":"payment_paid","data":{"id":"pay_1"}}'

    def _sign(self, secret="whsec_test"):
        return hmac.new(secret.encode(), self.body, hashlib.sha256).hexdigest()

    def test_valid_signature(self):
        self.assertTrue(verify_moyasar_signature(raw_body=self.body, signature=self._sign()))

    def test_wrong_secret_or_tampered_body(self):
        self.assertFalse(
            verify_moyasar_signature(raw_body=self.body, signature=self._sign("other"))
        )
        self.assertFalse(
            verify_moyasar_signature(raw_body=self.body + b" ", signature=self._sign())
        )

    def test_missing_signature(self):
        self.assertFalse(verify_moyasar_signature(raw_body=self.body, signature=None))

    def test_non_ascii_signature_is_rejected_not_raised(self):
        self.assertFalse(verify_moyasar_signature(raw_body=self.body, signature="\u00e9bad"))
        self.assertFalse(
            verify_moyasar_signature(raw_body=self.body, signature=self._sign() + "\u00e9")
        )

    @override_settings(PAYMENTS={"MOYASAR": {"WEBHOOK_SECRET": ""}})
    def test_missing_secret_never_verifies(self):
        self.assertFalse(verify_moyasar_signature(raw_body=self.body, signature=""))
        self.assertFalse(verify_moyasar_signature(raw_body=self.body, signature="abc"))


@override_settings(PAYMENTS=MOYASAR_SETTINGS)
class GatewayClientTests(SimpleTestCase):
    @mock.patch("payments.services.moyasar.urlopen")
    def test_create_payment_sends_basic_auth_and_amount(self, urlopen_mock):
        urlopen_mock.return_value = _fake_response(b'{"id": "pay_1", "status": "initiated"}')

        payment = moyasar_create_payment(
            amount=8100,
            currency="sar",
            description="Order ORD-1",
            source={"type": "token", "token": "tok_1"},
            metadata={"order_id": "abc"},
        )

        self.assertEqual(payment["id"], "pay_1")
        req = urlopen_mock.call_args[0][0]
        expected = base64.b64encode(b"sk_test_123:").decode("ascii")
        self.assertEqual(req.get_header("Authorization"), f"Basic {expected}")
        self.assertEqual(req.get_method(), "POST")
        self.assertIn(b'"amount": 8100', req.data)
        self.assertIn(b'"currency": "SAR"', req.data)
        self.assertIn(b"callback_url", req.data)

    @mock.patch("payments.services.moyasar.urlopen")
    def test_http_error_is_mapped(self, urlopen_mock):
        urlopen_mock.side_effect = HTTPError(
            "https://api.moyasar.com/v1/payments/pay_1",
            401,
            "Unauthorized",
            {},
            io.BytesIO(b'{"message": "Invalid authorization credentials"}'),
        )

        with self.assertRaisesMessage(PaymentGatewayError, "Invalid authorization credentials"):
            moyasar_get_payment("pay_1")

    @mock.patch("payments.services.moyasar.urlopen")
    def test_network_error_is_mapped(self, urlopen_mock):
        urlopen_mock.side_effect = URLError("timed out")

        with self.assertRaises(PaymentGatewayError):
            moyasar_get_payment("pay_1")

    @mock.patch("payments.services.moyasar.urlopen")
    def test_non_json_response(self, urlopen_mock):
        urlopen_mock.return_value = _fake_response(b"<html>bad gateway</html>")

        with self.assertRaises(PaymentGatewayError):
            moyasar_get_payment("pay_1")

    @override_settings(PAYMENTS={"MOYASAR": {}})
    def test_missing_secret_key(self):
        with self.assertRaises(PaymentGatewayError):
            moyasar_get_payment("pay_1")


class VerifyPaymentTests(SimpleTestCase):
    def _verify(self, payment, amount=8100, currency="SAR"):
        with mock.patch(
            "payments.services.moyasar.moyasar_get_payment", return_value=payment
        ):
            return moyasar_verify_payment("pay_1", amount, currency)

    def test_paid_with_matching_amount(self):
        result = self._verify({"id": "pay_1", "status": "paid", "amount": 8100, "currency": "SAR"})

        self.assertTrue(result.verified)
        self.assertFalse(result.mismatch)

    def test_amount_mismatch(self):
        result = self._verify({"status": "paid", "amount": 100, "currency": "SAR"})

        self.assertFalse(result.verified)
        self.assertTrue(result.mismatch)
        self.assertIn("Amount mismatch", result.error)

    def test_currency_mismatch(self):
        result = self._verify({"status": "paid", "amount": 8100, "currency": "USD"})

        self.assertTrue(result.mismatch)

    def test_not_paid_yet(self):
        result = self._verify({"status": "initiated", "amount": 8100, "currency": "SAR"})

        self.assertFalse(result.verified)
        self.assertFalse(result.mismatch)
        self.assertEqual(result.status, "initiated")
