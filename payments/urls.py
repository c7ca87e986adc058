from django.urls import path

from . import views

app_name = "payments"
urlpatterns = [
    path("create-payment", views.create_payment_view, name="create_payment"),
]
