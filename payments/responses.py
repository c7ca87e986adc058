from django.http import JsonResponse

from .integrations import Gateway, PaymentOrder, RegistrationRequest


def order_response(order: PaymentOrder, registration: RegistrationRequest, gateway: Gateway) -> JsonResponse:
    body = {
        "success": True,
        "gateway": order.gateway,
        "receipt": order.receipt,
        "amount": order.amount,
        "currency": order.currency,
        "purpose": registration.purpose,
        "buyer_name": registration.buyer_name,
        "buyer_email": registration.buyer_email,
        "buyer_phone": registration.buyer_phone,
    }
    if order.is_fallback:
        body.update(paymentUrl=order.redirect_url, fallback=True, message=order.message)
    else:
        body.update(gateway.checkout_fields(order))
    return JsonResponse(body)


def error_response(error: str, status: int, details=None) -> JsonResponse:
    body = {"success": False, "error": error}
    if details is not None:
        body["details"] = details
    return JsonResponse(body, status=status)
