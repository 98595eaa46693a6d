from datetime import timedelta
from django.utils import timezone
from django.db.models import Q
from .models import Announcement

EVENT_PRIORITY = {"HIGH": 5, "MEDIUM": 3, "LOW": 1}

EVENT_CATEGORIES = ("ACADEMIC", "HOLIDAY", "EXAM", "SPORTS", "CULTURAL", "MEETING", "OTHER")


def _active_window_q(window_start=None):
    now = timezone.now()
    q = Q(is_active=True) & Q(publish_date__lte=now)
    q &= Q(expiry_date__isnull=True) | Q(expiry_date__gt=now)
    if window_start is not None:
        q &= Q(publish_date__gte=window_start)
    return q


def active_announcements():
    return Announcement.objects.filter(_active_window_q())


def announcements_for_classes(class_ids, window_days: int | None = None, limit: int = 5):
    """School-wide notices plus the ones scoped to any of ``class_ids``."""
    window_start = None
    if window_days is not None:
        window_start = timezone.now() - timedelta(days=window_days)
    scope = Q(school_class__isnull=True) | Q(school_class_id__in=list(class_ids))
    return list(
        Announcement.objects.filter(_active_window_q(window_start) & scope)[:limit]
    )


def public_news(limit: int = 10):
    return list(active_announcements().filter(is_public=True)[:limit])


def upcoming_events(limit: int = 5, public_only: bool = False):
    qs = Announcement.objects.filter(
        announcement_type="EVENT",
        is_active=True,
        event_date__gte=timezone.localdate(),
    )
    if public_only:
        qs = qs.filter(is_public=True)
    return list(qs.order_by("event_date", "start_time")[:limit])


def event_priority(label: str) -> int:
    return EVENT_PRIORITY.get((label or "").upper(), 3)


def priority_label(priority: int) -> str:
    if priority >= 5:
        return "HIGH"
    if priority >= 3:
        return "MEDIUM"
    return "LOW"
