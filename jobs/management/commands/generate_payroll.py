from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from financials.payroll import generate_payroll, pay_period


class Command(BaseCommand):
    help = "Generate PENDING payroll records for every teacher for one month"

    def add_arguments(self, parser):
        today = timezone.localdate()
        parser.add_argument("--month", type=int, default=today.month)
        parser.add_argument("--year", type=int, default=today.year)

    def handle(self, *args, **options):
        month, year = options["month"], options["year"]
        if not 1 <= month <= 12:
            raise CommandError("--month must be between 1 and 12")
        summary = generate_payroll(month, year)
        self.stdout.write(
            self.style.SUCCESS(
                f"{pay_period(month, year)}: {len(summary['created'])} created, {summary['skipped']} skipped"
            )
        )
