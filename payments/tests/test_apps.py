from django.apps import apps
from django.core.exceptions import ImproperlyConfigured
from django.test import SimpleTestCase, override_settings


class StartupCheckTests(SimpleTestCase):
    def test_ready_with_credentials(self):
        apps.get_app_config("payments").ready()

    @override_settings(INSTAMOJO_AUTH_TOKEN="")
    def test_ready_refuses_missing_credentials(self):
        with self.assertLogs("payments.integrations.base", level="ERROR"):
            with self.assertRaisesMessage(ImproperlyConfigured, "INSTAMOJO_AUTH_TOKEN"):
                apps.get_app_config("payments").ready()
