import logging
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from requests.auth import HTTPBasicAuth

from ..exceptions import ProviderError
from .base import CURRENCY, Gateway, PaymentOrder, RegistrationRequest, truncate

logger = logging.getLogger(__name__)

MAX_RECEIPT = 40
MAX_NOTES = 15
MAX_NOTE_VALUE = 256


def to_paise(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class RazorpayGateway(Gateway):
    """Razorpay Orders API (v1).

    Amounts go out in paise. The browser finishes checkout with Razorpay's
    own script using the returned ``order_id`` and the public ``key_id``.
    """

    name = "razorpay"
    required_settings = ("RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET")

    def __init__(self, key_id, key_secret, base_url="https://api.razorpay.com/v1/", timeout=15):
        super().__init__(base_url, timeout)
        self.key_id = key_id
        self.key_secret = key_secret

    @classmethod
    def from_settings(cls):
        cls.check_settings()
        return cls(
            key_id=settings.RAZORPAY_KEY_ID,
            key_secret=settings.RAZORPAY_KEY_SECRET,
            base_url=settings.RAZORPAY_BASE_URL,
            timeout=settings.GATEWAY_TIMEOUT,
        )

    def _notes(self, registration: RegistrationRequest) -> dict:
        notes = {
            "purpose": registration.purpose,
            "buyer_name": registration.buyer_name,
            "buyer_email": registration.buyer_email,
            "buyer_phone": registration.buyer_phone,
        }
        if registration.registration_type:
            notes["registration_type"] = registration.registration_type
        for key, value in (registration.participant_details or {}).items():
            if len(notes) >= MAX_NOTES:
                break
            notes.setdefault(truncate(key, MAX_NOTE_VALUE), value)
        return {k: truncate(v, MAX_NOTE_VALUE) for k, v in notes.items()}

    def create_order(self, registration: RegistrationRequest, receipt: str) -> PaymentOrder:
        payload = {
            "amount": to_paise(registration.amount),
            "currency": CURRENCY,
            "receipt": truncate(receipt, MAX_RECEIPT),
            "notes": self._notes(registration),
        }
        resp = self._post(
            "orders",
            json=payload,
            auth=HTTPBasicAuth(self.key_id, self.key_secret),
            headers={"Content-Type": "application/json"},
        )
        data = self._json(resp)

        if resp.ok and data.get("id"):
            return PaymentOrder(
                provider_order_id=data["id"],
                amount=registration.amount,
                gateway=self.name,
                receipt=receipt,
                currency=data.get("currency") or CURRENCY,
                raw=data,
            )

        logger.error(
            "Razorpay rejected order receipt=%s: status=%s body=%s",
            receipt,
            resp.status_code,
            data,
        )
        error = data.get("error") or {}
        if not isinstance(error, dict):
            error = {}
        # 401 also reports BAD_REQUEST_ERROR, but bad keys are our fault
        caller_fault = resp.status_code == 400 and error.get("code") == "BAD_REQUEST_ERROR"
        message = error.get("description") or f"Razorpay API returned HTTP {resp.status_code}"
        raise ProviderError(message, detail=data, caller_fault=caller_fault)

    def checkout_fields(self, order: PaymentOrder) -> dict:
        return {
            "order_id": order.provider_order_id,
            "key_id": self.key_id,
            "amount_paise": to_paise(order.amount),
        }
