from decimal import Decimal

import pytest
from django.utils import timezone

from academics.models import ExamResult
from accounts.models import User
from attendance.models import AttendanceRecord, AttendanceSession
from staff import services
from staff.models import PerformanceReview

pytestmark = pytest.mark.django_db

SCORES = {
    "teachingQuality": 5,
    "studentEngagement": 5,
    "classroomManagement": 5,
    "communication": 5,
    "professionalism": 5,
    "innovation": 4,
}


@pytest.fixture
def taught(teacher, subject, student, exam):
    """Homeroom class with one graded exam and one attendance session."""
    teacher.teaching_subjects.add(subject)
    ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("80"))
    session = AttendanceSession.objects.create(school_class=student.school_class, date=timezone.localdate())
    AttendanceRecord.objects.create(session=session, student=student, status="PRESENT")
    return teacher


def test_experience_buckets(make_user):
    make_user(User.TEACHER, experience=1)
    make_user(User.TEACHER, experience=7)
    make_user(User.TEACHER, experience=12)
    assert User.objects.teachers().filter(services.experience_q("0")).count() == 1
    assert User.objects.teachers().filter(services.experience_q("5")).count() == 1
    assert User.objects.teachers().filter(services.experience_q("10")).count() == 1
    assert User.objects.teachers().filter(services.experience_q("all")).count() == 3


def test_teacher_list_filters(login, admin, taught, subject, make_user):
    make_user(User.TEACHER, experience=12, name="Vera Veteran")
    client = login(admin)
    by_subject = client.get("/api/admin/teachers/", {"subject": subject.pk}).json()["data"]
    assert [t["id"] for t in by_subject["teachers"]] == [taught.pk]
    assert by_subject["teachers"][0]["position"] == "Teacher"
    assert by_subject["teachers"][0]["subjects"][0]["code"] == "MATH"

    seniors = client.get("/api/admin/teachers/", {"experience": "10"}).json()["data"]
    assert [t["name"] for t in seniors["teachers"]] == ["Vera Veteran"]
    assert seniors["teachers"][0]["position"] == "Senior Teacher"


def test_teacher_create_and_duplicate_email(login, admin, subject):
    client = login(admin)
    payload = {"name": "New Teacher", "email": "New@School.test", "experience": 2, "subjectIds": [subject.pk]}
    created = client.post("/api/admin/teachers/", payload, content_type="application/json")
    assert created.status_code == 201
    assert created.json()["data"]["email"] == "new@school.test"
    assert created.json()["data"]["position"] == "Assistant Teacher"

    duplicate = client.post("/api/admin/teachers/", payload, content_type="application/json")
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "A user with this email already exists"


def test_performance_without_any_data_is_insufficient(teacher):
    row = services.performance_for([teacher])[0]
    assert row["rating"] is None
    assert row["ratingSource"] is None
    assert row["status"] == "insufficient_data"
    assert row["averageGrade"] is None
    assert row["attendanceRate"] is None


def test_performance_derived_rating(taught):
    row = services.performance_for([taught])[0]
    assert row["averageGrade"] == 80.0
    assert row["attendanceRate"] == 100.0
    assert row["rating"] == 4.4
    assert row["ratingSource"] == "derived"
    assert row["status"] == "good"
    assert row["totalStudents"] == 1


def test_review_overrides_derived_rating(login, admin, taught):
    client = login(admin)
    response = client.post(
        "/api/admin/teachers/performance/",
        dict(SCORES, teacherId=taught.pk, reviewPeriod="Q1", academicYear="2025-2026"),
        content_type="application/json",
    )
    assert response.status_code == 201
    assert response.json()["data"]["overallRating"] == 4.83
    assert PerformanceReview.objects.get().reviewer == admin

    data = client.get("/api/admin/teachers/performance/").json()["data"]
    row = data["teachers"][0]
    assert row["rating"] == 4.83
    assert row["ratingSource"] == "review"
    assert row["status"] == "excellent"
    assert data["summary"]["statusCounts"]["excellent"] == 1


def test_review_scores_must_be_in_range(login, admin, teacher):
    response = login(admin).post(
        "/api/admin/teachers/performance/",
        dict(SCORES, innovation=6, teacherId=teacher.pk, reviewPeriod="Q1", academicYear="2025-2026"),
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "All ratings must be between 1 and 5"
    assert not PerformanceReview.objects.exists()


def test_performance_status_filter(login, admin, teacher):
    data = login(admin).get("/api/admin/teachers/performance/", {"status": "excellent"}).json()["data"]
    assert data["teachers"] == []
    assert data["pagination"]["total"] == 0
    assert data["summary"]["totalTeachers"] == 1
