import json

import requests


def make_response(status_code, data=None, text=None):
    """A real ``requests.Response`` carrying ``data`` as its JSON body."""
    resp = requests.Response()
    resp.status_code = status_code
    resp.encoding = "utf-8"
    if data is not None:
        resp._content = json.dumps(data).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = (text or "").encode("utf-8")
        resp.headers["Content-Type"] = "text/html"
    return resp


def instamojo_created(longurl="https://www.instamojo.com/@heritagefest2025/abc123", request_id="abc123"):
    return make_response(201, {
        "success": True,
        "payment_request": {
            "id": request_id,
            "longurl": longurl,
            "status": "Pending",
            "amount": "300.00",
        },
    })


def razorpay_created(order_id="order_IluGWxBm9U8zJ8", amount=30000):
    return make_response(200, {
        "id": order_id,
        "entity": "order",
        "amount": amount,
        "currency": "INR",
        "status": "created",
    })


VALID_REQUEST = {
    "amount": "500",
    "purpose": "Dance Event",
    "buyer_name": "A",
    "buyer_email": "a@b.com",
    "buyer_phone": "9876543210",
}
