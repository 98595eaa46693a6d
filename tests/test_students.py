import datetime
from decimal import Decimal

import pytest
from django.utils import timezone

from academics.models import ExamResult
from accounts.models import User
from attendance.models import AttendanceRecord, AttendanceSession
from students.models import BehaviorRecord
from students.services import bulk_import, performance_for, performance_summary

pytestmark = pytest.mark.django_db


def _row(n, **extra):
    row = {
        "name": f"Student {n}",
        "email": f"bulk{n}@school.test",
        "studentNumber": f"BULK{n:03d}",
        "grade": "Grade 9",
    }
    row.update(extra)
    return row


def test_bulk_import_reports_each_row(student):
    rows = [
        _row(1),
        {"name": "No email"},
        _row(3, email="not-an-email"),
        _row(4, email=student.email),
        _row(5, classId=999999),
        _row(6, classId=student.school_class_id),
    ]
    summary = bulk_import(rows)

    assert summary["total"] == 6
    assert summary["processed"] == 6
    assert [c["row"] for c in summary["created"]] == [1, 6]
    assert summary["errors"] == [
        "Row 2: Missing required fields",
        "Row 3: Invalid email format",
        "Row 5: Class not found",
    ]
    assert len(summary["skipped"]) == 1
    assert summary["skipped"][0].startswith("Row 4:")
    created = User.objects.get(email="bulk6@school.test")
    assert created.role == User.STUDENT
    assert created.school_class_id == student.school_class_id
    assert not created.has_usable_password()


def test_bulk_import_through_api(login, admin):
    response = login(admin).post(
        "/api/admin/students/",
        {"students": [_row(1), _row(1, studentNumber="OTHER")]},
        content_type="application/json",
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["created"]) == 1
    assert len(data["skipped"]) == 1


def test_single_create_and_duplicate(login, admin):
    client = login(admin)
    response = client.post("/api/admin/students/", _row(7), content_type="application/json")
    assert response.status_code == 201
    assert response.json()["data"]["studentNumber"] == "BULK007"

    duplicate = client.post("/api/admin/students/", _row(7), content_type="application/json")
    assert duplicate.status_code == 409


def test_missing_field_names_the_field(login, admin):
    response = login(admin).post(
        "/api/admin/students/", {"name": "X", "studentNumber": "S1", "grade": "1"}, content_type="application/json"
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "email is required"}


def test_list_requires_staff(client, login, parent, student):
    assert client.get("/api/admin/students/").status_code == 401
    login(parent)
    response = client.get("/api/admin/students/")
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Unauthorized"}


def test_teacher_can_search_and_paginate(login, teacher, student, make_user):
    make_user(User.STUDENT, name="Other Person", student_number="STU002")
    response = login(teacher).get("/api/admin/students/", {"search": "sam", "generation": "4"})
    body = response.json()
    assert response.status_code == 200
    assert body["generation"] == 4
    assert [s["id"] for s in body["data"]["students"]] == [student.pk]
    assert body["data"]["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}


def test_malformed_class_filter_is_an_empty_page(login, admin, student):
    client = login(admin)
    response = client.get("/api/admin/students/", {"classId": "abc"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["students"] == []
    assert data["pagination"]["total"] == 0

    matched = client.get("/api/admin/students/", {"classId": str(student.school_class_id)}).json()["data"]
    assert [s["id"] for s in matched["students"]] == [student.pk]


def test_gender_must_be_a_known_choice(login, admin):
    client = login(admin)
    response = client.post("/api/admin/students/", _row(9, gender="robot"), content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == 'gender: "robot" is not a valid choice.'
    assert not User.objects.filter(email="bulk9@school.test").exists()

    created = client.post("/api/admin/students/", _row(9, gender="female"), content_type="application/json")
    assert created.status_code == 201
    assert User.objects.get(email="bulk9@school.test").gender == "female"


def test_teacher_cannot_create(login, teacher):
    response = login(teacher).post("/api/admin/students/", _row(8), content_type="application/json")
    assert response.status_code == 401


def test_invalid_json_body(login, admin):
    response = login(admin).post("/api/admin/students/", "{nope", content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid JSON body"


def test_performance_without_data_is_insufficient(student):
    row = performance_for([student])[0]
    assert row["gpa"] is None
    assert row["attendanceRate"] is None
    assert row["behaviorScore"] == 85
    assert row["status"] == "insufficient_data"
    assert row["subjectGrades"] == []
    assert all(month["averageScore"] is None and month["attendance"] is None for month in row["performanceTrend"])


def test_performance_from_results_attendance_and_behavior(student, exam, teacher):
    ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("90"))
    session = AttendanceSession.objects.create(school_class=student.school_class, date=datetime.date.today())
    AttendanceRecord.objects.create(session=session, student=student, status="PRESENT")
    BehaviorRecord.objects.create(student=student, record_type="POSITIVE_RECOGNITION", reported_by=teacher)

    row = performance_for([student], year=timezone.localtime(exam.date).year)[0]
    assert row["gpa"] == 3.6
    assert row["attendanceRate"] == 100.0
    assert row["behaviorScore"] == 90
    assert row["status"] == "excellent"
    assert row["strengths"] == ["Mathematics"]
    assert row["subjectGrades"][0]["grade"] == "A-"

    summary = performance_summary([row])
    assert summary["averageGpa"] == 3.6
    assert summary["statusCounts"]["excellent"] == 1
    assert summary["topPerformers"][0]["id"] == student.pk


def test_behavior_endpoint(login, teacher, student):
    response = login(teacher).post(
        f"/api/admin/students/{student.pk}/behavior/",
        {"type": "MINOR_INFRACTION", "description": "Late homework"},
        content_type="application/json",
    )
    assert response.status_code == 201
    assert BehaviorRecord.objects.filter(student=student, reported_by=teacher).count() == 1
