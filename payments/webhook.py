import logging

from django.http import HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from heritagefest.utils import request_data

from .integrations import get_gateway

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def payment_webhook(request):
    """Acknowledge a provider callback.

    Nothing is updated yet: payments are not stored locally. Authenticity is
    decided by ``Gateway.verify_webhook``.
    """
    gateway = get_gateway()
    if not gateway.verify_webhook(request):
        logger.warning("Rejected %s webhook from %s", gateway.name, request.META.get("REMOTE_ADDR"))
        return HttpResponse("Unauthorized", status=401)

    payload = request_data(request)
    if payload is None:
        payload = request.body[:2000]
    logger.info("Webhook received (%s): %s", gateway.name, payload)
    return HttpResponse("OK")
