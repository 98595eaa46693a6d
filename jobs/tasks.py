import logging

from django.utils import timezone
from django_rq import job

from admissions.models import AdmissionApplication
from financials.payroll import generate_payroll
from mailer.sending import send_application_email

logger = logging.getLogger(__name__)


@job("mail")
def send_application_notice(application_pk: int, template_key: str, event: str):
    application = AdmissionApplication.objects.filter(pk=application_pk).first()
    if application is None:
        logger.warning("Application %s vanished before its notice was sent", application_pk)
        return
    send_application_email(
        application,
        template_key,
        event,
        context={"status_label": application.get_status_display().replace("_", " ").title()},
    )


@job("default")
def generate_monthly_payroll(month: int | None = None, year: int | None = None):
    # the cron fires on the 1st; default to the month that just started
    today = timezone.localdate()
    month = month or today.month
    year = year or today.year
    summary = generate_payroll(month, year)
    return {"created": len(summary["created"]), "skipped": summary["skipped"]}
