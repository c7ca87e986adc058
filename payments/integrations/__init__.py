from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from .base import Gateway, PaymentOrder, RegistrationRequest
from .instamojo import InstamojoGateway
from .razorpay import RazorpayGateway

GATEWAYS = {
    InstamojoGateway.name: InstamojoGateway,
    RazorpayGateway.name: RazorpayGateway,
}


def get_gateway() -> Gateway:
    """Build the gateway named by ``settings.PAYMENT_GATEWAY``."""
    name = settings.PAYMENT_GATEWAY
    try:
        gateway_class = GATEWAYS[name]
    except KeyError:
        raise ImproperlyConfigured(
            f"Unsupported PAYMENT_GATEWAY={name!r} (expected one of: {', '.join(GATEWAYS)})"
        ) from None
    return gateway_class.from_settings()


__all__ = [
    "Gateway",
    "InstamojoGateway",
    "PaymentOrder",
    "RazorpayGateway",
    "RegistrationRequest",
    "get_gateway",
]
