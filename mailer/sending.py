import logging

from anymail.message import AnymailMessage
from django.conf import settings
from django.template.loader import render_to_string

from .models import EmailTemplate, MessageLog

logger = logging.getLogger(__name__)

RECEIVED = "application_received"
STATUS_CHANGED = "application_status"


def render_email(template, context):
    subject = template.subject_template.format(**context.get("subject_vars", {}))
    html_body = render_to_string(template.html_template_path, context)
    text_body = None
    if template.text_template_path:
        text_body = render_to_string(template.text_template_path, context)
    return subject, text_body, html_body


def send_application_email(application, template_key: str, event: str, context=None):
    """
    Email the applicant's parent. At most one message per
    (application, template, event); repeat calls are no-ops.
    """
    template = EmailTemplate.objects.filter(key=template_key).first()
    if template is None:
        logger.warning("Email template %s missing; nothing sent for %s", template_key, application.application_id)
        return None
    if MessageLog.objects.filter(application=application, template=template, event=event).exists():
        return None
    context = {
        "application": application,
        "school_name": settings.SCHOOL_NAME,
        "site_url": settings.SITE_URL,
        **(context or {}),
    }
    context.setdefault("subject_vars", {
        "application_id": application.application_id,
        "student": application.student_name,
        "school": settings.SCHOOL_NAME,
    })
    subject, text, html = render_email(template, context)
    msg = AnymailMessage(subject=subject, to=[application.parent_email])
    if text:
        msg.body = text
    msg.attach_alternative(html, "text/html")
    msg.metadata = {"application_id": application.application_id, "event": event}
    msg.tags = [template.key]
    msg.send()
    status = getattr(msg, "anymail_status", None)
    provider_id = getattr(status, "message_id", None) if status else None
    log, _ = MessageLog.objects.get_or_create(
        application=application,
        template=template,
        event=event,
        defaults={"provider_id": provider_id, "email": application.parent_email},
    )
    return log
