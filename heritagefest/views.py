from django.http import JsonResponse


def error_404_view(request, exception):
    return JsonResponse({"success": False, "error": "Not found"}, status=404)


def error_500_view(request):
    # the traceback is already logged by django.request
    return JsonResponse({"success": False, "error": "Internal server error"}, status=500)
