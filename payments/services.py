import logging
from dataclasses import replace
from decimal import Decimal
from urllib.parse import urlencode

from django import forms
from django.conf import settings

from .exceptions import GatewayError, TransportError, ValidationError
from .forms import AMOUNT_MESSAGE, MAX_AMOUNT, MIN_AMOUNT, REQUIRED_FIELDS, PaymentRequestForm
from .integrations import Gateway, PaymentOrder, RegistrationRequest, get_gateway
from .utils import generate_receipt

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Using fallback payment method due to API connectivity issues."


def _is_blank(value) -> bool:
    if isinstance(value, str):
        value = value.strip()
    return value in forms.Field.empty_values


def validate_payment_request(data) -> RegistrationRequest:
    missing = [name for name in REQUIRED_FIELDS if _is_blank(data.get(name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    form = PaymentRequestForm(data)
    if not form.is_valid():
        raise ValidationError(form.first_error())
    return form.to_registration()


def resolve_amount(registration: RegistrationRequest) -> RegistrationRequest:
    """Apply the fixed price of the registration type, if it has one.

    Without a priced type the client's amount is kept. Either way the result
    must still lie within the accepted range.
    """
    prices = settings.REGISTRATION_PRICES
    amount = registration.amount
    if registration.registration_type in prices:
        amount = Decimal(prices[registration.registration_type]).quantize(Decimal("0.01"))
    if not MIN_AMOUNT <= amount <= MAX_AMOUNT:
        raise ValidationError(AMOUNT_MESSAGE)
    if amount != registration.amount:
        logger.info(
            "Price for %s registration resolved to %s (client sent %s)",
            registration.registration_type,
            amount,
            registration.amount,
        )
        return replace(registration, amount=amount)
    return registration


def build_fallback_url(registration: RegistrationRequest) -> str:
    base = settings.PAYMENT_FALLBACK_URL
    query = urlencode({
        "data_name": registration.buyer_name,
        "data_email": registration.buyer_email,
        "data_amount": f"{registration.amount:.2f}",
    })
    return f"{base}{'&' if '?' in base else '?'}{query}"


def is_recoverable(error: GatewayError) -> bool:
    return isinstance(error, TransportError)


def handle_gateway_failure(error: GatewayError, registration: RegistrationRequest,
                           gateway: Gateway, receipt: str) -> PaymentOrder:
    """Turn a transport failure into a fallback order; re-raise anything else.

    Rejections by the provider are never masked with a fallback link.
    """
    if not is_recoverable(error):
        raise error
    logger.warning("Connection error (%s) for receipt=%s, providing fallback payment link", error.detail, receipt)
    return PaymentOrder(
        provider_order_id="",
        amount=registration.amount,
        gateway=gateway.name,
        receipt=receipt,
        status=PaymentOrder.FALLBACK,
        redirect_url=build_fallback_url(registration),
        message=FALLBACK_MESSAGE,
    )


def create_payment(registration: RegistrationRequest, gateway: Gateway = None) -> PaymentOrder:
    gateway = gateway or get_gateway()
    receipt = generate_receipt()
    logger.info(
        "Creating payment request: gateway=%s receipt=%s amount=%s purpose=%s buyer=%s <%s> %s",
        gateway.name,
        receipt,
        registration.amount,
        registration.purpose,
        registration.buyer_name,
        registration.buyer_email,
        registration.buyer_phone,
    )
    try:
        return gateway.create_order(registration, receipt)
    except GatewayError as e:
        return handle_gateway_failure(e, registration, gateway, receipt)


def process_payment_request(data, gateway: Gateway = None):
    """Validate, price and place a payment request.

    Returns ``(registration, order)``. Raises ``ValidationError`` before any
    remote call, and ``ProviderError`` / ``GatewayError`` when the gateway
    failed in a way that must not fall back.
    """
    registration = resolve_amount(validate_payment_request(data))
    return registration, create_payment(registration, gateway)
