import logging

from django.shortcuts import render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from heritagefest.utils import request_data

from .exceptions import GatewayError, ProviderError, ValidationError
from .integrations import get_gateway
from .responses import error_response, order_response
from .services import process_payment_request

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def create_payment_view(request):
    data = request_data(request)
    if data is None:
        return error_response("Invalid JSON body", 400)

    try:
        gateway = get_gateway()
        registration, order = process_payment_request(data, gateway)
    except ValidationError as e:
        return error_response(str(e), e.status_code)
    except ProviderError as e:
        return error_response(str(e), e.status_code, details=e.detail)
    except GatewayError as e:
        return error_response("Server error while creating payment", e.status_code, details=str(e))
    except Exception as e:
        # JSON instead of the HTML 500 page, the checkout script parses every answer
        logger.exception("Unexpected error while creating payment")
        return error_response("Server error while creating payment", 500, details=str(e))

    return order_response(order, registration, gateway)


@require_GET
def payment_success(request):
    ctx = {
        "payment_id": request.GET.get("payment_id") or request.GET.get("razorpay_payment_id") or "",
        "payment_request_id": request.GET.get("payment_request_id") or request.GET.get("razorpay_order_id") or "",
        "receipt": request.GET.get("receipt") or "",
    }
    return render(request, "payments/success.html", ctx)


@require_GET
def payment_failure(request):
    return render(request, "payments/failure.html")
