from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    name = "payments"

    def ready(self):
        # missing gateway credentials stop the process here
        from .integrations import get_gateway

        get_gateway()
