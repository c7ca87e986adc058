import json
from decimal import Decimal
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import requests
from django.test import SimpleTestCase, override_settings
from django.urls import reverse

from .helpers import VALID_REQUEST, instamojo_created, make_response, razorpay_created


@override_settings(
    PAYMENT_GATEWAY="instamojo",
    PAYMENT_FALLBACK_URL="https://www.instamojo.com/@heritagefest2025/",
    REGISTRATION_PRICES={"solo": Decimal("300"), "group": Decimal("1000")},
)
class CreatePaymentViewTests(SimpleTestCase):
    def _post(self, payload):
        return self.client.post(
            reverse("payments:create_payment"),
            data=json.dumps(payload),
            content_type="application/json",
        )

    def test_payment_link_returned(self):
        with patch("payments.integrations.base.requests.post", return_value=instamojo_created()) as post:
            resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["paymentUrl"], "https://www.instamojo.com/@heritagefest2025/abc123")
        self.assertEqual(body["payment_request_id"], "abc123")
        self.assertEqual(body["amount"], "500.00")
        self.assertEqual(body["currency"], "INR")
        self.assertEqual(body["buyer_email"], "a@b.com")
        self.assertEqual(body["gateway"], "instamojo")
        self.assertTrue(body["receipt"].startswith("REG"))
        self.assertNotIn("fallback", body)
        post.assert_called_once()

    def test_solo_registration_charged_fixed_price(self):
        payload = dict(VALID_REQUEST, registration_type="solo")
        with patch("payments.integrations.base.requests.post", return_value=instamojo_created()) as post:
            resp = self._post(payload)

        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["amount"], "300.00")
        self.assertEqual(post.call_args.kwargs["data"]["amount"], "300.00")

    def test_missing_field_rejected_without_remote_call(self):
        payload = dict(VALID_REQUEST)
        del payload["buyer_phone"]
        with patch("payments.integrations.base.requests.post") as post:
            resp = self._post(payload)

        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json(), {"success": False, "error": "Missing required fields: buyer_phone"})
        post.assert_not_called()

    def test_invalid_amount_rejected_without_remote_call(self):
        with patch("payments.integrations.base.requests.post") as post:
            resp = self._post(dict(VALID_REQUEST, amount="15000"))

        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()["success"])
        post.assert_not_called()

    def test_connection_reset_falls_back(self):
        with patch(
            "payments.integrations.base.requests.post",
            side_effect=requests.ConnectionError("Connection reset by peer"),
        ):
            with self.assertLogs("payments", level="WARNING"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["fallback"])
        self.assertEqual(body["message"], "Using fallback payment method due to API connectivity issues.")
        url = urlsplit(body["paymentUrl"])
        self.assertEqual(f"{url.scheme}://{url.netloc}{url.path}", "https://www.instamojo.com/@heritagefest2025/")
        self.assertEqual(parse_qs(url.query), {
            "data_name": ["A"],
            "data_email": ["a@b.com"],
            "data_amount": ["500.00"],
        })

    def test_timeout_falls_back(self):
        with patch("payments.integrations.base.requests.post", side_effect=requests.Timeout("timed out")):
            with self.assertLogs("payments", level="WARNING"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["fallback"])

    def test_reset_while_reading_body_falls_back(self):
        reset = requests.exceptions.ChunkedEncodingError(
            "Connection broken: ConnectionResetError(104, 'Connection reset by peer')"
        )
        with patch("payments.integrations.base.requests.post", side_effect=reset):
            with self.assertLogs("payments", level="WARNING"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertTrue(body["fallback"])
        self.assertTrue(body["paymentUrl"].startswith("https://www.instamojo.com/@heritagefest2025/"))

    def test_provider_rejection_does_not_fall_back(self):
        body = {"success": False, "message": {"purpose": ["This field is required."]}}
        with patch("payments.integrations.base.requests.post", return_value=make_response(400, body)):
            with self.assertLogs("payments.integrations.instamojo", level="ERROR"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 400)
        data = resp.json()
        self.assertFalse(data["success"])
        self.assertEqual(data["error"], "Instamojo API returned an error")
        self.assertEqual(data["details"], body)
        self.assertNotIn("fallback", data)

    def test_bad_credentials_answer_500(self):
        body = {"success": False, "message": "Invalid token"}
        with patch("payments.integrations.base.requests.post", return_value=make_response(401, body)):
            with self.assertLogs("payments.integrations.instamojo", level="ERROR"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 500)
        self.assertFalse(resp.json()["success"])
        self.assertNotIn("fallback", resp.json())

    def test_misconfigured_gateway_url_answers_500(self):
        with patch(
            "payments.integrations.base.requests.post",
            side_effect=requests.exceptions.InvalidURL("Invalid URL"),
        ):
            with self.assertLogs("payments.integrations.base", level="ERROR"):
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json()["error"], "Server error while creating payment")

    def test_unexpected_error_is_json(self):
        with patch("payments.views.process_payment_request", side_effect=RuntimeError("boom")):
            with self.assertLogs("payments.views", level="ERROR") as cm:
                resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.json(), {
            "success": False,
            "error": "Server error while creating payment",
            "details": "boom",
        })
        self.assertIn("Unexpected error while creating payment", cm.output[0])

    def test_invalid_json_body(self):
        resp = self.client.post(
            reverse("payments:create_payment"),
            data="{not json",
            content_type="application/json",
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid JSON body")

    def test_form_encoded_body_accepted(self):
        with patch("payments.integrations.base.requests.post", return_value=instamojo_created()):
            resp = self.client.post(reverse("payments:create_payment"), data=VALID_REQUEST)
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["success"])

    def test_get_not_allowed(self):
        resp = self.client.get(reverse("payments:create_payment"))
        self.assertEqual(resp.status_code, 405)

    @override_settings(PAYMENT_GATEWAY="razorpay")
    def test_razorpay_order_returned(self):
        with patch("payments.integrations.base.requests.post", return_value=razorpay_created(amount=50000)):
            resp = self._post(VALID_REQUEST)

        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["order_id"], "order_IluGWxBm9U8zJ8")
        self.assertEqual(body["key_id"], "rzp_test_key")
        self.assertEqual(body["amount_paise"], 50000)
        self.assertEqual(body["gateway"], "razorpay")
        self.assertNotIn("paymentUrl", body)


class PaymentPagesTests(SimpleTestCase):
    def test_success_page_shows_ids(self):
        resp = self.client.get(
            reverse("payment_success"),
            {"payment_id": "MOJO5a06005J21512197", "payment_request_id": "abc123"},
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "payments/success.html")
        self.assertContains(resp, "MOJO5a06005J21512197")
        self.assertContains(resp, "abc123")

    def test_success_page_escapes_query_values(self):
        resp = self.client.get(reverse("payment_success"), {"payment_id": "<script>alert(1)</script>"})
        self.assertNotContains(resp, "<script>alert(1)</script>")

    def test_success_page_without_ids(self):
        resp = self.client.get(reverse("payment_success"))
        self.assertContains(resp, "Processing...")

    def test_failure_page(self):
        resp = self.client.get(reverse("payment_failure"))
        self.assertEqual(resp.status_code, 200)
        self.assertTemplateUsed(resp, "payments/failure.html")
        self.assertContains(resp, "Payment Failed")
