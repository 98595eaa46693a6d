from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone

from academics.models import ExamResult, SchoolClass, SubjectPerformance
from accounts.models import User
from attendance.models import AttendanceRecord
from reporting import metrics
from reporting.api import REQUIRED_CODES
from .models import BehaviorRecord
from .serializers import StudentSerializer

logger = logging.getLogger(__name__)

STRENGTH_THRESHOLD = 85
WEAKNESS_THRESHOLD = 75


def student_row(student: User) -> Dict[str, Any]:
    school_class = student.school_class
    return {
        "id": student.pk,
        "name": student.display_name,
        "email": student.email,
        "studentNumber": student.student_number,
        "grade": student.grade_level,
        "phone": student.phone,
        "class": (
            {"id": school_class.pk, "name": str(school_class), "grade": school_class.grade}
            if school_class else None
        ),
        "parentName": student.parent_name,
        "parentEmail": student.parent_email,
        "createdAt": student.date_joined.isoformat() if student.date_joined else None,
    }


def duplicate_exists(email: str, student_number: str, exclude_pk=None) -> bool:
    qs = User.objects.filter(Q(email__iexact=email) | Q(student_number=student_number))
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def create_student(data: Dict[str, Any]) -> User:
    """Create one student from validated payload data. Raises IntegrityError on a duplicate."""
    password = getattr(settings, "DEFAULT_STUDENT_PASSWORD", "") or None
    with transaction.atomic():
        return User.objects.create_user(
            email=data["email"],
            password=password,
            role=User.STUDENT,
            name=data["name"].strip(),
            student_number=data["studentNumber"],
            grade_level=data["grade"],
            school_class_id=data.get("classId"),
            phone=data.get("phone", ""),
            address=data.get("address", ""),
            date_of_birth=data.get("dateOfBirth"),
            gender=data.get("gender", ""),
            parent_name=data.get("parentName", ""),
            parent_email=data.get("parentEmail", ""),
            parent_phone=data.get("parentPhone", ""),
        )


def _row_error(errors) -> str:
    for field_errors in errors.values():
        if any(getattr(e, "code", None) in REQUIRED_CODES for e in field_errors):
            return "Missing required fields"
    if "email" in errors:
        return "Invalid email format"
    field, field_errors = next(iter(errors.items()))
    return f"{field}: {field_errors[0]}"


def bulk_import(rows: List[Any]) -> Dict[str, Any]:
    """
    Create students row by row. A bad row never blocks the others: it lands
    in ``errors`` (invalid data) or ``skipped`` (already exists).
    """
    created: List[Dict[str, Any]] = []
    errors: List[str] = []
    skipped: List[str] = []
    known_classes = set(SchoolClass.objects.values_list("id", flat=True))
    for index, row in enumerate(rows):
        label = f"Row {index + 1}"
        if not isinstance(row, dict):
            errors.append(f"{label}: Missing required fields")
            continue
        serializer = StudentSerializer(data=row)
        if not serializer.is_valid():
            errors.append(f"{label}: {_row_error(serializer.errors)}")
            continue
        data = serializer.validated_data
        if duplicate_exists(data["email"], data["studentNumber"]):
            skipped.append(f"{label}: Email or student number already exists ({data['email']})")
            continue
        if data.get("classId") is not None and data["classId"] not in known_classes:
            errors.append(f"{label}: Class not found")
            continue
        try:
            student = create_student(data)
        except IntegrityError:
            # lost a race with a concurrent insert of the same email or number
            skipped.append(f"{label}: Email or student number already exists ({data['email']})")
            continue
        created.append(
            {
                "row": index + 1,
                "id": student.pk,
                "name": student.display_name,
                "email": student.email,
                "studentNumber": student.student_number,
            }
        )
    logger.info(
        "Bulk student import: %s rows, %s created, %s errors, %s skipped",
        len(rows), len(created), len(errors), len(skipped),
    )
    return {
        "total": len(rows),
        "processed": len(created) + len(errors) + len(skipped),
        "created": created,
        "errors": errors,
        "skipped": skipped,
    }


# Performance

def _group(rows: Iterable, key) -> Dict[Any, List]:
    grouped: Dict[Any, List] = defaultdict(list)
    for row in rows:
        grouped[key(row)].append(row)
    return grouped


def _behavior_counts(student_ids: List[int]) -> Dict[int, Dict[str, int]]:
    counts = {sid: {"positive": 0, "negative": 0} for sid in student_ids}
    rows = (
        BehaviorRecord.objects.filter(student_id__in=student_ids)
        .values("student_id", "record_type")
        .annotate(n=Count("id"))
    )
    for row in rows:
        if row["record_type"] in BehaviorRecord.POSITIVE:
            counts[row["student_id"]]["positive"] += row["n"]
        elif row["record_type"] in BehaviorRecord.NEGATIVE:
            counts[row["student_id"]]["negative"] += row["n"]
    return counts


def _subject_grades(performances: List[SubjectPerformance], results: List[ExamResult]) -> List[Dict[str, Any]]:
    latest: Dict[int, SubjectPerformance] = {}
    for perf in performances:
        current = latest.get(perf.subject_id)
        if current is None or perf.updated_at > current.updated_at:
            latest[perf.subject_id] = perf
    by_subject = _group(results, lambda r: r.exam.subject_id)
    grades = []
    subject_ids = list(latest) + [sid for sid in by_subject if sid not in latest]
    for subject_id in subject_ids:
        perf = latest.get(subject_id)
        if perf is not None:
            subject = perf.subject
            pct = float(perf.current_percentage)
            trend = perf.trend
        else:
            subject_results = by_subject[subject_id]
            subject = subject_results[0].exam.subject
            pct = metrics.safe_average(r.percentage for r in subject_results)
            trend = "STABLE"
        grades.append(
            {
                "subjectId": subject_id,
                "subject": subject.name,
                "code": subject.code,
                "percentage": metrics.round1(pct),
                "grade": metrics.letter_grade(pct),
                "trend": trend,
            }
        )
    return grades


def _trend(results: List[ExamResult], attendance_rows: List[Dict[str, Any]], year: int) -> List[Dict[str, Any]]:
    scores = [[] for _ in range(12)]
    for r in results:
        stamp = timezone.localtime(r.exam.date)
        if stamp.year == year:
            scores[stamp.month - 1].append(r.percentage)
    year_rows = [row for row in attendance_rows if row["session__date"].year == year]
    present = metrics.monthly_buckets(
        year_rows, lambda row: row["session__date"], value=lambda row: 1 if row["status"] == "PRESENT" else 0
    )
    taken = metrics.monthly_buckets(year_rows, lambda row: row["session__date"])
    trend = []
    for month in range(12):
        month_scores = scores[month]
        trend.append(
            {
                "month": metrics.MONTH_LABELS[month],
                "averageScore": metrics.round1(metrics.safe_average(month_scores)) if month_scores else None,
                "attendance": metrics.attendance_rate(present[month], taken[month]),
            }
        )
    return trend


def performance_for(students: List[User], year: int | None = None) -> List[Dict[str, Any]]:
    """Per-student GPA, attendance, behaviour and status, in a fixed number of queries."""
    year = year or timezone.localdate().year
    ids = [s.pk for s in students]
    if not ids:
        return []
    performances = _group(
        SubjectPerformance.objects.filter(student_id__in=ids).select_related("subject"),
        lambda p: p.student_id,
    )
    results = _group(
        ExamResult.objects.filter(student_id__in=ids).select_related("exam__subject"),
        lambda r: r.student_id,
    )
    attendance_rows = _group(
        AttendanceRecord.objects.filter(student_id__in=ids).values("student_id", "status", "session__date"),
        lambda row: row["student_id"],
    )
    behavior = _behavior_counts(ids)

    rows = []
    for student in students:
        student_results = results.get(student.pk, [])
        student_attendance = attendance_rows.get(student.pk, [])
        subject_grades = _subject_grades(performances.get(student.pk, []), student_results)
        gpa = metrics.gpa_from_percentages([g["percentage"] for g in subject_grades])
        present = sum(1 for row in student_attendance if row["status"] == "PRESENT")
        attendance = metrics.attendance_rate(present, len(student_attendance))
        counts = behavior[student.pk]
        score = metrics.behavior_score(counts["positive"], counts["negative"])
        row = student_row(student)
        row.update(
            {
                "gpa": gpa,
                "attendanceRate": attendance,
                "behaviorScore": score,
                "status": metrics.classify_student(gpa, attendance, score),
                "subjectGrades": subject_grades,
                "strengths": [g["subject"] for g in subject_grades if g["percentage"] >= STRENGTH_THRESHOLD],
                "weaknesses": [g["subject"] for g in subject_grades if g["percentage"] < WEAKNESS_THRESHOLD],
                "totalExams": len(student_results),
                "averageScore": metrics.round1(metrics.safe_average(r.percentage for r in student_results)),
                "performanceTrend": _trend(student_results, student_attendance, year),
            }
        )
        rows.append(row)
    return rows


def performance_summary(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    statuses = ["excellent", "good", "average", "needs_attention", "insufficient_data"]
    counts = {status: 0 for status in statuses}
    for row in rows:
        counts[row["status"]] += 1
    gpas = [row["gpa"] for row in rows if row["gpa"] is not None]
    attendance = [row["attendanceRate"] for row in rows if row["attendanceRate"] is not None]
    ranked = sorted((row for row in rows if row["gpa"] is not None), key=lambda r: r["gpa"], reverse=True)
    return {
        "totalStudents": len(rows),
        "averageGpa": round(metrics.safe_average(gpas), 2) if gpas else None,
        "averageAttendance": metrics.round1(metrics.safe_average(attendance)) if attendance else None,
        "averageBehavior": metrics.round1(metrics.safe_average(row["behaviorScore"] for row in rows)),
        "statusCounts": counts,
        "topPerformers": [
            {"id": r["id"], "name": r["name"], "gpa": r["gpa"]} for r in ranked[:5]
        ],
    }
