from django.conf import settings
from django.core.management.base import BaseCommand
from django_rq import get_scheduler

from jobs.tasks import generate_monthly_payroll


class Command(BaseCommand):
    help = "Apply rq-scheduler cron schedules for recurring school jobs"

    def handle(self, *args, **options):
        scheduler = get_scheduler("default")
        # Clear existing payroll jobs to avoid duplicates
        for job in scheduler.get_jobs():
            if job.func_name.endswith("generate_monthly_payroll"):
                scheduler.cancel(job)
        cron = settings.PAYROLL_SCHEDULE_CRON
        scheduler.cron(cron, func=generate_monthly_payroll, repeat=None, queue_name="default")
        self.stdout.write(self.style.SUCCESS(f"Scheduled monthly payroll with cron '{cron}'"))
