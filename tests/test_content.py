import datetime

import pytest
from django.urls import reverse
from django.utils import timezone

from content import services
from content.models import Announcement, Inquiry

pytestmark = pytest.mark.django_db

EVENTS = "/api/admin/events/"


@pytest.mark.parametrize(
    "name", ["home", "about", "programs", "news", "contact", "admissions", "apply", "track", "terms", "privacy"]
)
def test_public_pages_render(client, name):
    assert client.get(reverse(f"content:{name}")).status_code == 200


def test_announcements_page_requires_login(client, login, student):
    assert client.get(reverse("content:announcements")).status_code == 302
    assert login(student).get(reverse("content:announcements")).status_code == 200


def test_contact_form_stores_inquiry(client):
    response = client.post(
        reverse("content:contact"),
        {
            "name": "Jo Visitor",
            "email": "jo@example.com",
            "topic": "Admissions",
            "subject": "Open day",
            "body": "When is the next open day?",
        },
    )
    assert response.status_code == 302
    inquiry = Inquiry.objects.get()
    assert inquiry.status == "OPEN"
    assert inquiry.topic == "Admissions"


def test_contact_form_errors_rerender(client):
    response = client.post(reverse("content:contact"), {"name": "Jo"})
    assert response.status_code == 200
    assert not Inquiry.objects.exists()


def test_scoped_announcements(admin, school_class):
    now = timezone.now()
    Announcement.objects.create(title="All", content="x", publish_date=now, created_by=admin)
    Announcement.objects.create(
        title="Class", content="x", publish_date=now, school_class=school_class, created_by=admin
    )
    Announcement.objects.create(
        title="Expired", content="x", publish_date=now - datetime.timedelta(days=3),
        expiry_date=now - datetime.timedelta(days=1), created_by=admin,
    )
    assert {a.title for a in services.announcements_for_classes([])} == {"All"}
    assert {a.title for a in services.announcements_for_classes([school_class.pk])} == {"All", "Class"}


def test_priority_mapping():
    assert services.event_priority("high") == 5
    assert services.event_priority("unknown") == 3
    assert services.priority_label(5) == "HIGH"
    assert services.priority_label(1) == "LOW"


def test_event_lifecycle(login, admin):
    client = login(admin)
    day = timezone.localdate() + datetime.timedelta(days=10)
    created = client.post(
        EVENTS,
        {"title": "Sports Day", "description": "Track and field", "date": day.isoformat(),
         "type": "sports", "priority": "high", "location": "Main field"},
        content_type="application/json",
    )
    assert created.status_code == 201
    event = created.json()["data"]
    assert event["type"] == "SPORTS"
    assert event["priority"] == "HIGH"
    stored = Announcement.objects.get(pk=event["id"])
    assert stored.announcement_type == "EVENT"
    assert timezone.localtime(stored.expiry_date).date() == day
    assert services.upcoming_events()[0].pk == stored.pk

    updated = client.put(
        f"{EVENTS}{stored.pk}/", {"location": "Gym", "priority": "low"}, content_type="application/json"
    ).json()["data"]
    assert updated["location"] == "Gym"
    assert updated["priority"] == "LOW"
    assert updated["title"] == "Sports Day"

    listed = client.get(EVENTS).json()["data"]
    assert [e["id"] for e in listed["events"]] == [stored.pk]

    assert client.delete(f"{EVENTS}{stored.pk}/").status_code == 200
    assert client.put(f"{EVENTS}{stored.pk}/", {}, content_type="application/json").status_code == 404


def test_event_validation(login, admin):
    response = login(admin).post(
        EVENTS,
        {"title": "Party", "description": "x", "date": timezone.localdate().isoformat(), "type": "rave"},
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid event type"


def test_events_api_is_admin_only(login, teacher):
    assert login(teacher).get(EVENTS).status_code == 401
