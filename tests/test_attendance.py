import datetime

import pytest
from django.utils import timezone

from accounts.models import User
from attendance import services
from attendance.models import AttendanceRecord, AttendanceSession

pytestmark = pytest.mark.django_db

URL = "/api/admin/attendance/"


def _payload(school_class, *records, date=None):
    return {
        "classId": school_class.pk,
        "date": (date or timezone.localdate()).isoformat(),
        "records": [{"studentId": pk, "status": status} for pk, status in records],
    }


def test_teacher_records_a_session(login, teacher, school_class, student, make_user):
    other = make_user(User.STUDENT, school_class=school_class)
    client = login(teacher)
    response = client.post(
        URL, _payload(school_class, (student.pk, "PRESENT"), (other.pk, "ABSENT")), content_type="application/json"
    )
    assert response.status_code == 201
    body = response.json()
    assert body["data"]["present"] == 1
    assert body["data"]["attendanceRate"] == 50.0
    assert body["message"] == "Attendance recorded: 1 of 2 present"
    assert AttendanceSession.objects.get().taken_by == teacher

    listed = client.get(URL, {"classId": school_class.pk}).json()["data"]
    assert listed["sessions"][0]["totalRecords"] == 2
    assert listed["sessions"][0]["takenBy"] == teacher.display_name


def test_second_session_same_day_conflicts(login, teacher, school_class, student):
    client = login(teacher)
    payload = _payload(school_class, (student.pk, "PRESENT"))
    assert client.post(URL, payload, content_type="application/json").status_code == 201
    again = client.post(URL, payload, content_type="application/json")
    assert again.status_code == 409
    assert AttendanceRecord.objects.count() == 1


def test_unknown_class_and_students(login, teacher, school_class, student, parent):
    client = login(teacher)
    payload = _payload(school_class, (student.pk, "PRESENT"))
    payload["classId"] = 999999
    assert client.post(URL, payload, content_type="application/json").status_code == 404

    strangers = client.post(
        URL, _payload(school_class, (student.pk, "PRESENT"), (parent.pk, "LATE")), content_type="application/json"
    )
    assert strangers.status_code == 400
    assert strangers.json()["error"] == f"Students not found: {parent.pk}"
    assert not AttendanceSession.objects.exists()


def test_record_rules(login, teacher, school_class, student):
    client = login(teacher)
    empty = client.post(URL, _payload(school_class), content_type="application/json")
    assert empty.json()["error"] == "At least one attendance record is required"
    twice = client.post(
        URL, _payload(school_class, (student.pk, "PRESENT"), (student.pk, "ABSENT")), content_type="application/json"
    )
    assert twice.json()["error"] == "Each student may appear only once"


def test_parents_cannot_record(login, parent, school_class, student):
    response = login(parent).post(URL, _payload(school_class, (student.pk, "PRESENT")), content_type="application/json")
    assert response.status_code == 401


def test_student_rate_is_none_without_records(student):
    assert services.student_rate(student) is None


def test_student_rate_counts_present_only(student, school_class):
    today = timezone.localdate()
    for offset, status in enumerate(["PRESENT", "PRESENT", "LATE"]):
        session = AttendanceSession.objects.create(
            school_class=school_class, date=today - datetime.timedelta(days=offset)
        )
        AttendanceRecord.objects.create(session=session, student=student, status=status)
    assert services.student_rate(student) == 66.7
