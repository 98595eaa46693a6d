import logging

from anymail.signals import tracking
from django.dispatch import receiver
from .models import EmailEvent, MessageLog

logger = logging.getLogger(__name__)


@receiver(tracking)
def handle_tracking(sender, event, esp_name, **kwargs):
    message = None
    if event.message_id:
        message = MessageLog.objects.filter(provider_id=event.message_id).first()
    EmailEvent.objects.create(
        message=message,
        event=event.event_type,
        provider_id=event.event_id,
        email=event.recipient or "",
        payload=event.esp_event if isinstance(event.esp_event, dict) else {},
    )
    if event.event_type in {"bounced", "complained"} and message:
        logger.warning(
            "Admissions email %s to %s for %s was %s",
            message.pk, message.email, message.application_id, event.event_type,
        )
