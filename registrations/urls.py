from django.urls import path

from . import views

app_name = "registrations"
urlpatterns = [
    path("save-registration", views.save_registration, name="save_registration"),
    path("registrations", views.list_registrations, name="list_registrations"),
]
