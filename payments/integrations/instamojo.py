import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from django.conf import settings

from ..exceptions import ProviderError
from .base import Gateway, PaymentOrder, RegistrationRequest, truncate

logger = logging.getLogger(__name__)

# Field limits of the v1.1 payment-requests endpoint
MAX_PURPOSE = 30
MAX_BUYER_NAME = 100
MAX_EMAIL = 75
MAX_PHONE = 20


def _with_receipt(url: str, receipt: str) -> str:
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True) + [("receipt", receipt)]
    return urlunsplit(parts._replace(query=urlencode(query)))


class InstamojoGateway(Gateway):
    """Instamojo API v1.1 payment requests.

    The API takes form-encoded rupee amounts and answers with a hosted
    ``longurl`` the buyer is redirected to. It has no reference field, so the
    receipt travels as a ``receipt`` query parameter on the redirect URL.
    Participant details are not sent.
    """

    name = "instamojo"
    required_settings = ("INSTAMOJO_API_KEY", "INSTAMOJO_AUTH_TOKEN")

    def __init__(self, api_key, auth_token, base_url="https://www.instamojo.com/api/1.1/",
                 timeout=15, redirect_url=""):
        super().__init__(base_url, timeout)
        self.api_key = api_key
        self.auth_token = auth_token
        self.redirect_url = redirect_url

    @classmethod
    def from_settings(cls):
        cls.check_settings()
        return cls(
            api_key=settings.INSTAMOJO_API_KEY,
            auth_token=settings.INSTAMOJO_AUTH_TOKEN,
            base_url=settings.INSTAMOJO_BASE_URL,
            timeout=settings.GATEWAY_TIMEOUT,
            redirect_url=settings.PAYMENT_REDIRECT_URL,
        )

    def _headers(self) -> dict:
        return {
            "X-Api-Key": self.api_key,
            "X-Auth-Token": self.auth_token,
            "Content-Type": "application/x-www-form-urlencoded",
        }

    def create_order(self, registration: RegistrationRequest, receipt: str) -> PaymentOrder:
        payload = {
            "purpose": truncate(registration.purpose, MAX_PURPOSE),
            "amount": f"{registration.amount:.2f}",
            "buyer_name": truncate(registration.buyer_name, MAX_BUYER_NAME),
            "email": truncate(registration.buyer_email, MAX_EMAIL),
            "phone": truncate(registration.buyer_phone, MAX_PHONE),
            "redirect_url": _with_receipt(registration.redirect_url or self.redirect_url, receipt),
            "send_email": "True",
            "send_sms": "True",
            "allow_repeated_payments": "False",
        }
        resp = self._post("payment-requests/", data=payload, headers=self._headers())
        data = self._json(resp)

        if resp.ok and data.get("success"):
            payment_request = data.get("payment_request") or {}
            longurl = payment_request.get("longurl")
            if not longurl:
                logger.error("Instamojo response missing longurl for receipt=%s: %s", receipt, data)
                raise ProviderError("Gateway did not return a payment link", detail=data)
            return PaymentOrder(
                provider_order_id=str(payment_request.get("id") or ""),
                amount=registration.amount,
                gateway=self.name,
                receipt=receipt,
                redirect_url=longurl,
                raw=data,
            )

        logger.error(
            "Instamojo rejected payment request receipt=%s: status=%s body=%s",
            receipt,
            resp.status_code,
            data,
        )
        # 400 carries per-field messages about what the buyer typed; a 2xx
        # with success=false is the same kind of answer
        caller_fault = resp.status_code == 400 or resp.ok
        raise ProviderError("Instamojo API returned an error", detail=data, caller_fault=caller_fault)

    def checkout_fields(self, order: PaymentOrder) -> dict:
        return {"paymentUrl": order.redirect_url, "payment_request_id": order.provider_order_id}
