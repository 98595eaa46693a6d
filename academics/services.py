from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from attendance import services as attendance_services
from reporting import metrics
from reporting.metrics import percentage, round_half_up
from .models import Exam, ExamResult, SchoolClass

logger = logging.getLogger(__name__)


def class_row(school_class: SchoolClass, student_count: Optional[int] = None) -> Dict[str, Any]:
    if student_count is None:
        student_count = getattr(school_class, "student_count", None)
    if student_count is None:
        student_count = school_class.students.count()
    teacher = school_class.teacher
    return {
        "id": school_class.pk,
        "name": str(school_class),
        "grade": school_class.grade,
        "section": school_class.section,
        "capacity": school_class.capacity,
        "teacher": (
            {"id": teacher.pk, "name": teacher.display_name, "email": teacher.email}
            if teacher else None
        ),
        "studentCount": student_count,
    }


def classes_with_counts():
    return SchoolClass.objects.select_related("teacher").annotate(
        student_count=Count("students", distinct=True)
    ).order_by("grade", "section")


def class_stats(school_class: SchoolClass) -> Dict[str, Any]:
    """Headline numbers for one class; an empty class reports zeros and N/A."""
    total_students = school_class.students.count()
    occupancy = 0
    if total_students and school_class.capacity:
        occupancy = metrics.round1(percentage(total_students, school_class.capacity))
    return {
        "totalStudents": total_students,
        "averageAttendance": attendance_services.class_rate(school_class),
        "totalSubjects": school_class.subjects.count(),
        "totalExams": school_class.exams.count(),
        "occupancyRate": occupancy,
        "availableSeats": max(0, school_class.capacity - total_students),
    }


def class_detail(school_class: SchoolClass) -> Dict[str, Any]:
    data = class_row(school_class)
    data["students"] = [
        {
            "id": s.pk,
            "name": s.display_name,
            "email": s.email,
            "studentNumber": s.student_number,
        }
        for s in school_class.students.order_by("name", "email")
    ]
    data["subjects"] = [
        {"id": s.pk, "name": s.name, "code": s.code, "credits": s.credits}
        for s in school_class.subjects.all()
    ]
    data["stats"] = class_stats(school_class)
    return data


def exam_row(exam: Exam) -> Dict[str, Any]:
    return {
        "id": exam.pk,
        "title": exam.title,
        "description": exam.description,
        "type": exam.exam_type,
        "date": exam.date.isoformat(),
        "duration": exam.duration,
        "totalMarks": exam.total_marks,
        "passMarks": exam.pass_marks,
        "class": {"id": exam.school_class_id, "name": str(exam.school_class)},
        "subject": {"id": exam.subject_id, "name": exam.subject.name, "code": exam.subject.code},
    }


def result_stats(exam: Exam, results: Optional[List[ExamResult]] = None) -> Dict[str, Any]:
    """Average %, pass rate and grade buckets; all zero when nothing is recorded."""
    if results is None:
        results = list(exam.results.all())
    pcts = [percentage(r.marks_obtained, exam.total_marks) for r in results]
    passed = sum(1 for r in results if exam.is_pass(r.marks_obtained))
    return {
        "totalResults": len(results),
        "averageScore": round_half_up(metrics.safe_average(pcts)),
        "passRate": round_half_up(percentage(passed, len(results))),
        "passed": passed,
        "failed": len(results) - passed,
        "gradeDistribution": metrics.grade_distribution(pcts),
    }


def result_row(result: ExamResult) -> Dict[str, Any]:
    pct = result.percentage
    return {
        "id": result.pk,
        "studentId": result.student_id,
        "studentName": result.student.display_name,
        "studentNumber": result.student.student_number,
        "marksObtained": float(result.marks_obtained),
        "percentage": metrics.round1(pct),
        "grade": result.grade or metrics.result_grade(pct),
        "passed": result.passed,
        "remarks": result.remarks,
    }


def record_result(exam: Exam, student, marks, remarks: str = "", grade: str = "") -> ExamResult:
    """
    Create or update one result. Marks above the exam total are rejected by
    ExamResult.save() whichever path writes them.
    """
    result = ExamResult.objects.filter(exam=exam, student=student).first()
    if result is None:
        result = ExamResult(exam=exam, student=student)
    result.marks_obtained = marks
    result.remarks = remarks or ""
    result.grade = grade or metrics.letter_grade(percentage(marks, exam.total_marks))
    result.save()
    return result


def record_results(exam: Exam, rows: List[Dict[str, Any]], students: Dict[int, Any]):
    """All-or-nothing: one bad row rolls the batch back."""
    saved = []
    with transaction.atomic():
        for row in rows:
            student = students.get(row["studentId"])
            if student is None:
                raise ValidationError({"studentId": f"Student {row['studentId']} not found"})
            saved.append(
                record_result(
                    exam,
                    student,
                    row["marksObtained"],
                    remarks=row.get("remarks", ""),
                    grade=row.get("grade", ""),
                )
            )
    return saved


def results_overview(exams) -> Dict[str, Any]:
    """Per-exam rows plus an overall distribution for the results page."""
    rows = []
    all_pcts: List[float] = []
    total_results = 0
    total_passed = 0
    for exam in exams:
        results = list(exam.results.all())
        stats = result_stats(exam, results)
        rows.append({"exam": exam_row(exam), "stats": stats})
        all_pcts.extend(percentage(r.marks_obtained, exam.total_marks) for r in results)
        total_results += stats["totalResults"]
        total_passed += stats["passed"]
    return {
        "exams": rows,
        "summary": {
            "totalExams": len(rows),
            "totalResults": total_results,
            "averageScore": round_half_up(metrics.safe_average(all_pcts)),
            "passRate": round_half_up(percentage(total_passed, total_results)),
            "gradeDistribution": metrics.grade_distribution(all_pcts),
        },
    }
