from django.conf import settings
from django.core.management.commands.runserver import Command as RunserverCommand


class Command(RunserverCommand):
    """``runserver`` that listens on ``settings.PORT`` unless told otherwise."""

    default_port = str(settings.PORT)
