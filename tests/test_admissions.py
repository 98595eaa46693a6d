import datetime
import re
from unittest import mock

import pytest
from django.core.management import call_command
from django.utils import timezone

from admissions import services
from admissions.models import AdmissionApplication, ApplicationDocument, ApplicationTimeline

pytestmark = pytest.mark.django_db

PAYLOAD = {
    "studentFirstName": "Mia",
    "studentLastName": "Jones",
    "studentDateOfBirth": "2012-03-04",
    "studentGender": "female",
    "studentGrade": "Grade 7",
    "parentFirstName": "Lee",
    "parentLastName": "Jones",
    "parentEmail": "lee.jones@example.com",
    "parentPhone": "+1-555-0100",
    "parentAddress": "1 Elm Street",
}


@pytest.fixture
def seeded(db):
    call_command("seed_school", password="seed-pass-123")
    return AdmissionApplication.objects.get(application_id="APP-2024-001234")


def _application(**fields):
    data = {
        "application_id": fields.pop("application_id", services.new_application_id()),
        "student_first_name": "Kim",
        "student_last_name": "Lee",
        "student_date_of_birth": datetime.date(2011, 1, 1),
        "student_gender": "male",
        "student_grade": "Grade 8",
        "parent_first_name": "Jo",
        "parent_last_name": "Lee",
        "parent_email": "jo@example.com",
        "parent_phone": "555",
        "parent_address": "Somewhere",
    }
    data.update(fields)
    return AdmissionApplication.objects.create(**data)


def test_tracking_the_seeded_application(client, seeded):
    response = client.get("/api/admissions/", {"applicationId": "APP-2024-001234"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["applicationId"] == "APP-2024-001234"
    assert data["studentName"] == "John Smith"
    assert data["status"] == "pending"
    assert data["nextStep"] == "Your application is being reviewed by our admissions team."
    assert len(data["timeline"]) == 1
    assert data["timeline"][0]["status"] == "Application Submitted"
    assert [d["name"] for d in data["documents"]] == [
        "Birth Certificate", "Academic Transcripts", "Medical Records",
    ]
    assert {d["status"] for d in data["documents"]} == {"pending"}


def test_seed_command_is_idempotent(seeded):
    call_command("seed_school", password="seed-pass-123")
    assert AdmissionApplication.objects.filter(application_id="APP-2024-001234").count() == 1
    assert seeded.timeline.count() == 1
    assert seeded.documents.count() == 3


def test_tracking_errors(client, db):
    missing = client.get("/api/admissions/")
    assert missing.status_code == 400
    assert missing.json()["error"] == "Application ID is required"
    unknown = client.get("/api/admissions/", {"applicationId": "APP-1999-000000"})
    assert unknown.status_code == 404
    assert unknown.json()["error"] == "Application not found"


def test_public_submission(client, django_capture_on_commit_callbacks):
    with mock.patch("admissions.services.send_application_notice") as notice:
        with django_capture_on_commit_callbacks(execute=True):
            response = client.post("/api/admissions/", PAYLOAD, content_type="application/json")
    assert response.status_code == 201
    body = response.json()
    application_id = body["applicationId"]
    assert re.fullmatch(r"APP-\d{4}-\d{6}", application_id)
    assert body["data"]["status"] == "pending"
    application = AdmissionApplication.objects.get(application_id=application_id)
    timeline = list(application.timeline.all())
    assert [(t.status, t.description) for t in timeline] == [
        ("Application Submitted", "Application received and logged in system"),
    ]
    notice.delay.assert_called_once_with(application.pk, "application_received", "submitted")


@pytest.mark.parametrize(
    "field,value,error",
    [
        ("parentEmail", "not-an-email", "Invalid email format"),
        ("studentDateOfBirth", "31/02/2012", "Invalid date format"),
        ("studentFirstName", "", "studentFirstName is required"),
    ],
)
def test_submission_validation(client, db, field, value, error):
    payload = dict(PAYLOAD, **{field: value})
    response = client.post("/api/admissions/", payload, content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == error
    assert not AdmissionApplication.objects.exists()


def test_submission_retries_id_collisions(db):
    _application(application_id="APP-2030-000001")
    ids = iter(["APP-2030-000001", "APP-2030-000002"])
    with mock.patch("admissions.services.new_application_id", side_effect=lambda: next(ids)):
        application = services.submit_application(dict(PAYLOAD))
    assert application.application_id == "APP-2030-000002"


def test_status_change_adds_timeline_once(login, admin, seeded, django_capture_on_commit_callbacks):
    client = login(admin)
    url = "/api/admin/admissions/APP-2024-001234/status/"
    with mock.patch("admissions.services.send_application_notice") as notice:
        with django_capture_on_commit_callbacks(execute=True):
            first = client.put(url, {"status": "UNDER_REVIEW"}, content_type="application/json")
            second = client.put(url, {"status": "under review"}, content_type="application/json")
    assert first.json()["changed"] is True
    assert second.json()["changed"] is False
    assert second.json()["message"] == "Application already has this status"
    seeded.refresh_from_db()
    assert seeded.status == "UNDER_REVIEW"
    assert list(seeded.timeline.values_list("status", flat=True)) == ["Application Submitted", "Under Review"]
    notice.delay.assert_called_once_with(seeded.pk, "application_status", "UNDER_REVIEW")


def test_invalid_status_rejected(login, admin, seeded):
    response = login(admin).put(
        "/api/admin/admissions/APP-2024-001234/status/", {"status": "MAYBE"}, content_type="application/json"
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid application status"


def test_document_review_is_idempotent(login, admin, seeded):
    document = seeded.documents.get(document_type="Birth Certificate")
    url = f"/api/admin/admissions/APP-2024-001234/documents/{document.pk}/"
    client = login(admin)
    first = client.put(url, {"status": "APPROVED"}, content_type="application/json")
    document.refresh_from_db()
    reviewed_at = document.reviewed_at
    second = client.put(url, {"status": "approved"}, content_type="application/json")
    document.refresh_from_db()

    assert first.json()["changed"] is True
    assert second.json()["changed"] is False
    assert document.status == "APPROVED"
    assert document.reviewed_at == reviewed_at
    assert seeded.timeline.count() == 1


def test_document_must_belong_to_application(login, admin, seeded):
    other = _application()
    doc = ApplicationDocument.objects.create(application=other, document_type="Photo", file_name="p.jpg")
    response = login(admin).put(
        f"/api/admin/admissions/APP-2024-001234/documents/{doc.pk}/",
        {"status": "APPROVED"},
        content_type="application/json",
    )
    assert response.status_code == 404


def test_admin_list_filters(login, admin, seeded):
    _application(student_grade="Grade 3", status="ACCEPTED")
    client = login(admin)
    accepted = client.get("/api/admin/admissions/", {"status": "ACCEPTED"}).json()["data"]
    assert [a["grade"] for a in accepted["applications"]] == ["Grade 3"]
    search = client.get("/api/admin/admissions/", {"search": "John"}).json()["data"]
    assert [a["applicationId"] for a in search["applications"]] == ["APP-2024-001234"]


def test_admissions_endpoints_require_admin(client, login, teacher, seeded):
    assert client.get("/api/admin/admissions/").status_code == 401
    login(teacher)
    assert client.get("/api/admin/admissions/reports/").status_code == 401


def test_report_counts_and_activity(db):
    _application(status="ACCEPTED", student_grade="Grade 8")
    _application(status="REJECTED", student_grade="Grade 8")
    _application(status="PENDING", student_grade="Grade 5")
    report = services.admissions_report("thisYear", "all")
    stats = report["stats"]
    assert stats["total"] == 3
    assert stats["accepted"] == 1
    assert stats["rejected"] == 1
    assert stats["pending"] == 1
    assert stats["thisMonth"] == 3
    assert stats["lastMonth"] == 0
    assert stats["growthRate"] == 0
    grade8 = next(row for row in report["gradeDistribution"] if row["grade"] == "Grade 8")
    assert grade8 == {"grade": "Grade 8", "applications": 2, "accepted": 1, "acceptanceRate": 50.0}
    assert len(report["monthlyData"]) == 12
    assert report["monthlyData"][-1]["applications"] == 3
    assert report["monthlyData"][-1]["month"] == timezone.localtime().strftime("%b")
    statuses = sorted(item["status"] for item in report["recentActivity"])
    assert statuses == ["error", "info", "success"]


def test_report_grade_filter_and_period_validation(login, admin, db):
    _application(student_grade="Grade 8")
    _application(student_grade="Grade 5")
    client = login(admin)
    response = client.get("/api/admin/admissions/reports/", {"grade": "Grade 5", "period": "thisMonth"})
    assert response.json()["data"]["stats"]["total"] == 1
    bad = client.get("/api/admin/admissions/reports/", {"period": "forever"})
    assert bad.status_code == 400


def test_period_windows():
    now = timezone.make_aware(datetime.datetime(2025, 6, 15, 12, 0))
    start, end = services.period_window("lastYear", now)
    assert timezone.localtime(start).date() == datetime.date(2024, 1, 1)
    assert timezone.localtime(end).date() == datetime.date(2024, 12, 31)
    start, _ = services.period_window("thisMonth", now)
    assert timezone.localtime(start).date() == datetime.date(2025, 6, 1)
    start, _ = services.period_window("thisWeek", now)
    assert (now - start).days == 7
