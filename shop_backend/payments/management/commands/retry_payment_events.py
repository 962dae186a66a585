from django.core.management.base import BaseCommand

from payments.services.reconciliation import retry_failed_events


class Command(BaseCommand):
    help = "Re-verify pending online orders whose latest payment reconciliation failed"

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Maximum number of orders to re-verify",
        )

    def handle(self, *args, **options):
        summary = retry_failed_events(limit=options["limit"])

        self.stdout.write(
            self.style.SUCCESS(
                "Checked {checked} order(s): {paid} paid, {failed} failed, "
                "{pending} still pending.".format(**summary)
            )
        )
