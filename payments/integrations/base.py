import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional, Union

import requests
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from requests import RequestException
from requests.exceptions import ChunkedEncodingError

from ..exceptions import GatewayError, TransportError

logger = logging.getLogger(__name__)

CURRENCY = "INR"

# a reset while the body is streamed surfaces as ChunkedEncodingError
TRANSPORT_ERRORS = (requests.ConnectionError, requests.Timeout, ChunkedEncodingError)


@dataclass(frozen=True)
class RegistrationRequest:
    amount: Decimal
    purpose: str
    buyer_name: str
    buyer_email: str
    buyer_phone: str
    redirect_url: Optional[str] = None
    registration_type: Optional[str] = None
    participant_details: Optional[Mapping[str, Union[str, int, float]]] = None


@dataclass(frozen=True)
class PaymentOrder:
    # create_order only returns CREATED; FALLBACK comes from the failure
    # handler. FAILED is left for callers recording a declined payment.
    CREATED = "created"
    FALLBACK = "fallback"
    FAILED = "failed"

    provider_order_id: str
    amount: Decimal
    gateway: str
    receipt: str
    status: str = CREATED
    currency: str = CURRENCY
    redirect_url: Optional[str] = None
    message: Optional[str] = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_fallback(self) -> bool:
        return self.status == self.FALLBACK


def truncate(value, limit: int) -> str:
    return ("" if value is None else str(value))[:limit]


class Gateway:
    """Common contract of the payment providers.

    ``create_order`` returns a :class:`PaymentOrder` or raises
    :class:`~payments.exceptions.TransportError` when the provider could not
    be reached and :class:`~payments.exceptions.ProviderError` when it
    answered with a rejection.
    """

    name = ""
    required_settings = ()

    def __init__(self, base_url: str, timeout: float = 15):
        self.base_url = base_url
        self.timeout = timeout

    @classmethod
    def check_settings(cls):
        missing = [name for name in cls.required_settings if not getattr(settings, name, "")]
        if missing:
            logger.error("%s gateway selected but credentials are missing: %s", cls.name, ", ".join(missing))
            raise ImproperlyConfigured(f"Missing required environment variables: {', '.join(missing)}")

    @classmethod
    def from_settings(cls) -> "Gateway":
        raise NotImplementedError

    def create_order(self, registration: RegistrationRequest, receipt: str) -> PaymentOrder:
        raise NotImplementedError

    def checkout_fields(self, order: PaymentOrder) -> dict:
        """Fields the browser needs to complete checkout for ``order``."""
        raise NotImplementedError

    def verify_webhook(self, request) -> bool:
        """Decide whether a provider callback is authentic.

        Callbacks are accepted as they are. Override this in a gateway
        subclass once the provider's signing scheme has been confirmed.
        """
        return True

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _post(self, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        try:
            return requests.post(url, timeout=self.timeout, **kwargs)
        except TRANSPORT_ERRORS as e:
            logger.warning("%s unreachable at %s: %r", self.name, url, e)
            raise TransportError(f"Gateway unreachable: {e}", detail=type(e).__name__)
        except RequestException as e:
            logger.exception("%s request to %s failed", self.name, url)
            raise GatewayError(f"Gateway request failed: {e}")

    @staticmethod
    def _json(resp: requests.Response) -> dict:
        try:
            data = resp.json()
        except ValueError:
            return {"raw": resp.text[:800]}
        return data if isinstance(data, dict) else {"raw": data}
