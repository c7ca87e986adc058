import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from heritagefest.utils import request_data

from .store import RegistrationStore, StorageError

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def save_registration(request):
    data = request_data(request)
    if data is None:
        return JsonResponse({"success": False, "error": "Invalid JSON body"}, status=400)
    try:
        record = RegistrationStore().save(data)
    except StorageError:
        logger.exception("Error saving registration")
        return JsonResponse({"success": False, "error": "Failed to save registration data"}, status=500)
    return JsonResponse({
        "success": True,
        "message": "Registration saved successfully",
        "registrationId": record["id"],
    })


@require_GET
def list_registrations(request):
    try:
        registrations = RegistrationStore().all()
    except StorageError:
        logger.exception("Error reading registrations")
        return JsonResponse({"success": False, "error": "Failed to read registrations"}, status=500)
    return JsonResponse({"success": True, "registrations": registrations})
