import logging
from urllib.parse import urlparse

from allauth.account.models import EmailAddress
from allauth.account.signals import user_logged_in
from django.conf import settings
from django.contrib.sites.models import Site
from django.db.models.signals import post_migrate, post_save
from django.dispatch import receiver

from .models import User

logger = logging.getLogger(__name__)


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    site = getattr(settings, "SITE_URL", "")
    if site.startswith("http://localhost:8000"):
        EmailAddress.objects.update_or_create(
            user=user,
            email=user.email,
            defaults={"verified": True, "primary": True},
        )


@receiver(post_save, sender=User)
def link_parent_and_children(sender, instance, created, **kwargs):
    """Match students to parent accounts through the student's parent_email."""
    from students.models import ParentStudentLink

    if instance.role == User.STUDENT and instance.parent_email:
        parent = User.objects.filter(
            role=User.PARENT, email__iexact=instance.parent_email
        ).first()
        if parent:
            ParentStudentLink.objects.get_or_create(user=parent, student=instance)
    elif instance.role == User.PARENT and created:
        children = User.objects.filter(
            role=User.STUDENT, parent_email__iexact=instance.email
        )
        for child in children:
            ParentStudentLink.objects.get_or_create(user=instance, student=child)
        if children:
            logger.info("Linked parent %s to %s students", instance.pk, len(children))


@receiver(post_migrate)
def sync_site_domain(sender, **kwargs):
    if sender.name != "accounts":
        return
    site_url = getattr(settings, "SITE_URL", "")
    host = urlparse(site_url).hostname if site_url else None
    if not host:
        return
    sid = getattr(settings, "SITE_ID", 1)
    Site.objects.update_or_create(id=sid, defaults={"domain": host, "name": settings.SCHOOL_NAME})
