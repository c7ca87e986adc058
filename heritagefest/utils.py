import json


def request_data(request):
    """Return the submitted fields as a dict, or ``None`` for a malformed JSON body.

    The registration page posts JSON; plain HTML forms post url-encoded data.
    """
    if request.content_type == "application/json":
        try:
            body = json.loads(request.body.decode("utf-8") or "{}")
        except (UnicodeDecodeError, ValueError):
            return None
        return body if isinstance(body, dict) else None
    return request.POST.dict()
