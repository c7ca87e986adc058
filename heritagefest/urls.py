from django.urls import include, path

from payments import views as payment_views
from payments.webhook import payment_webhook

urlpatterns = [
    path("api/", include("payments.urls")),
    path("api/", include("registrations.urls")),
    path("webhook", payment_webhook, name="webhook"),
    path("payment-success", payment_views.payment_success, name="payment_success"),
    path("payment-failure", payment_views.payment_failure, name="payment_failure"),
]

handler404 = "heritagefest.views.error_404_view"
handler500 = "heritagefest.views.error_500_view"
