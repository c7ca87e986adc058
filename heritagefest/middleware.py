from django.conf import settings
from django.http import HttpResponse


class CorsMiddleware:
    """Allow the registration page to call the API from any origin.

    Preflight ``OPTIONS`` requests are answered here with an empty ``200``
    and never reach the views.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.method == "OPTIONS":
            response = HttpResponse(status=200)
        else:
            response = self.get_response(request)
        response["Access-Control-Allow-Origin"] = getattr(settings, "CORS_ALLOW_ORIGIN", "*")
        response["Access-Control-Allow-Methods"] = getattr(settings, "CORS_ALLOW_METHODS", "POST, OPTIONS")
        response["Access-Control-Allow-Headers"] = getattr(settings, "CORS_ALLOW_HEADERS", "Content-Type")
        return response
