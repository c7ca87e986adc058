import requests
from django.core.management.base import BaseCommand

from payments.integrations import get_gateway


class Command(BaseCommand):
    help = "Check that the configured payment gateway API can be reached from this host"

    def add_arguments(self, parser):
        parser.add_argument("--timeout", type=float, default=5.0)
        parser.add_argument(
            "--url",
            action="append",
            default=[],
            help="Extra URL to probe (repeatable). Defaults to https://google.com as a reference.",
        )

    def handle(self, *args, **opts):
        gateway = get_gateway()
        urls = [gateway.base_url] + (opts["url"] or ["https://google.com"])

        failed = 0
        for url in urls:
            try:
                resp = requests.get(url, timeout=opts["timeout"])
                self.stdout.write(self.style.SUCCESS(f"{url} - reachable (HTTP {resp.status_code})"))
            except requests.RequestException as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f"{url} - FAILED: {type(e).__name__}: {e}"))

        if failed:
            self.stdout.write(self.style.WARNING(
                f"{failed} of {len(urls)} unreachable; checkouts will use the fallback payment link "
                f"while the {gateway.name} API cannot be reached."
            ))
        else:
            self.stdout.write(self.style.SUCCESS(f"{gateway.name} gateway reachable."))
