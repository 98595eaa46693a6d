import logging
from datetime import datetime, time

from django.utils import timezone

from reporting.api import fail, first_error, generation, json_endpoint, ok
from reporting.query import page_params, paginate, search_q
from . import services
from .models import Announcement
from .serializers import EventSerializer

logger = logging.getLogger(__name__)

ADMIN = ("ADMIN",)

FIELD_MAP = {
    "title": "title",
    "description": "content",
    "date": "event_date",
    "startTime": "start_time",
    "endTime": "end_time",
    "type": "event_category",
    "location": "location",
    "isPublic": "is_public",
}


def event_row(event: Announcement):
    return {
        "id": event.pk,
        "title": event.title,
        "description": event.content,
        "date": event.event_date.isoformat() if event.event_date else None,
        "startTime": event.start_time or None,
        "endTime": event.end_time or None,
        "type": event.event_category or "OTHER",
        "location": event.location or None,
        "isPublic": event.is_public,
        "priority": services.priority_label(event.priority),
        "createdAt": event.created_at.isoformat(),
        "updatedAt": event.updated_at.isoformat(),
    }


def _apply(event: Announcement, data, payload):
    for key, attr in FIELD_MAP.items():
        if key in payload and key in data:
            setattr(event, attr, data[key])
    if "priority" in payload and "priority" in data:
        event.priority = services.event_priority(data["priority"])


@json_endpoint(methods=("GET", "POST"), roles=ADMIN)
def events(request):
    if request.method == "GET":
        qs = Announcement.objects.filter(announcement_type="EVENT").order_by("event_date", "start_time", "id")
        qs = qs.filter(search_q(request.GET.get("search"), ["title", "content", "location"]))
        if request.GET.get("startDate"):
            qs = qs.filter(event_date__gte=request.GET["startDate"])
        if request.GET.get("endDate"):
            qs = qs.filter(event_date__lte=request.GET["endDate"])
        page, limit = page_params(request)
        result = paginate(qs, page, limit)
        return ok(
            {
                "events": [event_row(e) for e in result.items],
                "pagination": result.pagination(),
            },
            generation=generation(request),
        )

    serializer = EventSerializer(data=request.payload)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    event = Announcement(
        announcement_type="EVENT",
        publish_date=timezone.now(),
        # hide the notice once the day of the event is over
        expiry_date=timezone.make_aware(datetime.combine(data["date"], time.max)),
        created_by=request.user,
    )
    _apply(event, data, data)
    event.save()
    logger.info("Event %s scheduled for %s", event.pk, event.event_date)
    return ok(event_row(event), status=201, message="Event created successfully")


@json_endpoint(methods=("PUT", "DELETE"), roles=ADMIN)
def event_detail(request, pk: int):
    event = Announcement.objects.filter(pk=pk, announcement_type="EVENT").first()
    if event is None:
        return fail("Event not found", 404)

    if request.method == "DELETE":
        event.delete()
        return ok(message="Event deleted successfully")

    serializer = EventSerializer(data=request.payload, partial=True)
    if not serializer.is_valid():
        return fail(first_error(serializer.errors))
    data = serializer.validated_data
    _apply(event, data, request.payload)
    if "date" in data:
        event.expiry_date = timezone.make_aware(datetime.combine(data["date"], time.max))
    event.save()
    return ok(event_row(event), message="Event updated successfully")
