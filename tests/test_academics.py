import datetime
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from academics import services
from academics.models import Exam, ExamResult, SchoolClass

pytestmark = pytest.mark.django_db


def test_empty_class_stats(teacher):
    empty = SchoolClass.objects.create(name="Grade 2-C", grade=2, section="C", capacity=25, teacher=teacher)
    stats = services.class_stats(empty)
    assert stats == {
        "totalStudents": 0,
        "averageAttendance": None,
        "totalSubjects": 0,
        "totalExams": 0,
        "occupancyRate": 0,
        "availableSeats": 25,
    }


def test_class_detail_api_includes_stats(login, admin, student):
    response = login(admin).get(f"/api/admin/classes/{student.school_class_id}/")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["studentCount"] == 1
    assert data["stats"]["occupancyRate"] == 3.3
    assert [s["id"] for s in data["students"]] == [student.pk]


def test_class_delete_refused_while_students_enrolled(login, admin, student):
    response = login(admin).delete(f"/api/admin/classes/{student.school_class_id}/")
    assert response.status_code == 400
    assert "1 enrolled students" in response.json()["error"]
    assert SchoolClass.objects.filter(pk=student.school_class_id).exists()


def test_class_create_conflict_and_teacher_role(login, admin, school_class, student):
    client = login(admin)
    clash = client.post(
        "/api/admin/classes/", {"name": "Dup", "grade": 9, "section": "A"}, content_type="application/json"
    )
    assert clash.status_code == 409

    wrong_role = client.post(
        "/api/admin/classes/",
        {"name": "Grade 9-B", "grade": 9, "section": "B", "teacherId": student.pk},
        content_type="application/json",
    )
    assert wrong_role.status_code == 400
    assert wrong_role.json()["error"] == "Selected user is not a teacher"

    bad_grade = client.post(
        "/api/admin/classes/", {"name": "X", "grade": 13, "section": "A"}, content_type="application/json"
    )
    assert bad_grade.json()["error"] == "Grade must be between 1 and 12"


def test_exam_pass_boundary(exam, student):
    assert exam.is_pass(40) is True
    assert exam.is_pass(Decimal("39.99")) is False
    result = ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("40"))
    assert result.passed is True


def test_result_marks_cannot_exceed_total(exam, student):
    with pytest.raises(ValidationError):
        ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("101"))
    with pytest.raises(ValidationError):
        ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("-1"))


def test_pass_marks_check_constraint(school_class, subject):
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Exam.objects.create(
                title="Broken",
                exam_type="QUIZ",
                school_class=school_class,
                subject=subject,
                date=timezone.now(),
                duration=30,
                total_marks=50,
                pass_marks=60,
            )


def test_exam_create_validates_pass_marks(login, admin, school_class, subject):
    payload = {
        "title": "Final",
        "type": "FINAL",
        "classId": school_class.pk,
        "subjectId": subject.pk,
        "date": (timezone.now() + datetime.timedelta(days=7)).isoformat(),
        "duration": 90,
        "totalMarks": 100,
        "passMarks": 120,
    }
    client = login(admin)
    response = client.post("/api/admin/exams/", payload, content_type="application/json")
    assert response.status_code == 400
    assert response.json()["error"] == "Pass marks cannot exceed total marks"

    payload["passMarks"] = 50
    created = client.post("/api/admin/exams/", payload, content_type="application/json")
    assert created.status_code == 201
    assert created.json()["data"]["passMarks"] == 50


def test_results_stats_zero_without_results(exam):
    stats = services.result_stats(exam)
    assert stats["totalResults"] == 0
    assert stats["averageScore"] == 0
    assert stats["passRate"] == 0


def test_result_upsert_and_stats(login, teacher, exam, student, make_user):
    other = make_user("STUDENT", school_class=exam.school_class)
    client = login(teacher)
    url = f"/api/admin/exams/{exam.pk}/results/"
    response = client.post(
        url,
        {"results": [
            {"studentId": student.pk, "marksObtained": "85"},
            {"studentId": other.pk, "marksObtained": "30"},
        ]},
        content_type="application/json",
    )
    assert response.status_code == 200
    stats = response.json()["data"]["stats"]
    assert stats["totalResults"] == 2
    assert stats["passed"] == 1
    assert stats["passRate"] == 50
    assert stats["averageScore"] == 58

    # same student again updates in place
    client.post(url, {"studentId": student.pk, "marksObtained": "95"}, content_type="application/json")
    assert ExamResult.objects.get(exam=exam, student=student).marks_obtained == Decimal("95")
    assert ExamResult.objects.filter(exam=exam).count() == 2


def test_result_batch_rolls_back_on_bad_row(login, admin, exam, student, make_user):
    other = make_user("STUDENT")
    response = login(admin).post(
        f"/api/admin/exams/{exam.pk}/results/",
        {"results": [
            {"studentId": student.pk, "marksObtained": "50"},
            {"studentId": other.pk, "marksObtained": "150"},
        ]},
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Marks cannot exceed total marks (100)"
    assert not ExamResult.objects.filter(exam=exam).exists()


def test_results_overview_distribution(exam, student, make_user):
    ExamResult.objects.create(exam=exam, student=student, marks_obtained=Decimal("92"))
    ExamResult.objects.create(exam=exam, student=make_user("STUDENT"), marks_obtained=Decimal("35"))
    overview = services.results_overview(Exam.objects.prefetch_related("results"))
    assert overview["summary"]["totalExams"] == 1
    assert overview["summary"]["gradeDistribution"]["A+"] == 1
    assert overview["summary"]["gradeDistribution"]["F"] == 1
    assert overview["exams"][0]["stats"]["passRate"] == 50
